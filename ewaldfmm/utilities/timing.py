"""
Module for handling the timing of an Ewald summation pass.
"""
import time
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import TimerError


@dataclass
class EwaldTimer:
    """
    Nanosecond timer. Modified from https://realpython.com/python-timer/
    """

    _start_time: Optional[int] = field(default=None, init=False, repr=False)

    def start(self):
        """Start a new timer"""
        if self._start_time is not None:
            raise TimerError("Timer is running. Use .stop() to stop it")

        self._start_time = time.perf_counter_ns()

    def stop(self) -> int:
        """
        Stop the timer, and report the elapsed time.

        Returns
        -------
        elapsed_time: int
            Elapsed time in nanoseconds.

        """
        if self._start_time is None:
            raise TimerError("Timer is not running. Use .start() to start it")

        elapsed_time = time.perf_counter_ns() - self._start_time
        self._start_time = None

        return elapsed_time

    @staticmethod
    def time_division(tme: int) -> list:
        """
        Divide time into hours, min, sec, msec, microsec (usec), and nanosec.

        Parameters
        ----------
        tme : int
            Time in nanoseconds.

        Returns
        -------
        : list
            [hours, min, sec, msec, microsec (usec), nanosec]

        """
        t_hrs, rem = divmod(tme, 3.6e12)
        t_min, rem_m = divmod(rem, 6e10)
        t_sec, rem_s = divmod(rem_m, 1e9)
        t_msec, rem_ms = divmod(rem_s, 1e6)
        t_usec, rem_us = divmod(rem_ms, 1e3)
        t_nsec, _ = divmod(rem_us, 1)

        return [t_hrs, t_min, t_sec, t_msec, t_usec, t_nsec]


def format_time(message: str, timing: list) -> str:
    """
    Build the elapsed time line written to screen and log file.

    Parameters
    ----------
    message : str
        Label of the timed section.

    timing : list
        Time in hrs, min, sec, msec, usec, nsec. See :meth:`EwaldTimer.time_division`.

    Returns
    -------
    : str
        Formatted message.

    """
    t_hrs, t_min, t_sec, t_msec, t_usec, t_nsec = timing

    if t_hrs == 0 and t_min == 0 and t_sec <= 2:
        return f"{message} Time: {int(t_sec)} sec {int(t_msec)} msec {int(t_usec)} usec {int(t_nsec)} nsec"

    return f"{message} Time: {int(t_hrs)} hrs {int(t_min)} min {int(t_sec)} sec"

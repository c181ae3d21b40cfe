"""
Module handling the input file and the log file of an Ewald summation.
"""
import datetime
import sys
import yaml
from os.path import exists


def read_yaml(filename: str) -> dict:
    """
    Parse inputs from YAML file.

    Parameters
    ----------
    filename: str
        Input YAML file.

    Returns
    -------
    dics : dict
        Content of YAML file parsed in a nested dictionary.

    """
    with open(filename, "r") as stream:
        dics = yaml.load(stream, Loader=yaml.FullLoader)

    return dics


def datetime_stamp(log_file: str):
    """Add a Date and Time stamp to log file. If the file exists it appends three paragraph so that it is easier to see
    the new line.

    Parameters
    ----------
    log_file : str
        Path to file on which date time stamp should be appended to.

    """

    if exists(log_file):
        with open(log_file, "a+") as f_log:
            # Add some space to better distinguish the new beginning
            print("\n\n\n", file=f_log)

    with open(log_file, "a+") as f_log:
        ct = datetime.datetime.now()
        print(f"{'':~^80}", file=f_log)
        print(f"Date: {ct.year} - {ct.month} - {ct.day}", file=f_log)
        print(f"Time: {ct.hour}:{ct.minute}:{ct.second}", file=f_log)
        print(f"{'':~^80}\n", file=f_log)


def print_to_logger(message, log_file, print_to_screen: bool = False):
    """Print message to log file and to screen if `print_to_screen` is `True`.

    Parameters
    ----------
    message : str
        Message to append to log and screen.

    log_file: str
        Path to log file.

    print_to_screen : bool
        Flag for printing to screen. Default = `False`.

    """

    screen = sys.stdout
    repeat = 2 if print_to_screen else 1

    with open(log_file, "a+") as f_log:
        # redirect printing to file
        sys.stdout = f_log
        try:
            while repeat > 0:
                print(message)
                repeat -= 1
                sys.stdout = screen
        finally:
            sys.stdout = screen

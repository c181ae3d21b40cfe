import sys
import setuptools

# Package Requirements
BASE_DEPENDENCIES = [
    'numpy',
    'scipy',
    'numba>=0.50',
    'pyyaml',
]

TEST_DEPENDENCIES = [
    'pytest',
]

PACKAGENAME = 'ewaldfmm'
DESCRIPTION = 'Ewald summation core of a periodic fast multipole method.'
DESCRIPTION_FILE = 'README.md'
VERSION = '0.1.0'
LICENSE = 'MIT'
__minimum_python_version__ = '3.8'

# Enforce Python version check - this is the same check as in __init__.py
if sys.version_info < tuple((int(val) for val in __minimum_python_version__.split('.'))):
    sys.stderr.write("ERROR: {} requires Python {} or later\n".format(PACKAGENAME, __minimum_python_version__))
    sys.exit(1)

# Read the README file into a string
with open(DESCRIPTION_FILE, "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name=PACKAGENAME,
    version=VERSION,
    description=DESCRIPTION,
    long_description=long_description,
    long_description_content_type="text/markdown",
    license=LICENSE,
    packages=setuptools.find_packages(),
    install_requires=BASE_DEPENDENCIES,
    extras_require={'tests': TEST_DEPENDENCIES},
    classifiers=[
        # Chose either "3 - Alpha", "4 - Beta" or "5 - Production/Stable" as the current state of your package
        'Development Status :: 3 - Alpha',
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.8',
)

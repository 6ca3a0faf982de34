# This file makes the 'commands' directory a Python package
# Importing command modules from here

from . import config
from . import diff

# This file makes the 'utils' directory a Python package
# The diff engine lives here: sequence -> myers -> hunks, changes -> renames, header -> formatter

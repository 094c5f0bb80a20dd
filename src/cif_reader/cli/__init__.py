"""
CIF Reader Command-Line Interface
=================================

This package provides the command-line tool for the CIF reader:

- **cifdump**: Record listing, schedule listing, statistics and
  validation of CIF timetable files

The tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["cifdump"]

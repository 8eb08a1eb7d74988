"""stackforge: scaffold new projects from the command line."""

__version__ = "0.1.0"

"""SWE Router - pick the best-fit model for a software-engineering task and run it."""

__version__ = "0.1.0"

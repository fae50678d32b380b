"""airday: a 24-hour rolling broadcast scheduler for a single radio station."""

__version__ = "0.1.0"

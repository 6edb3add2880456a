"""Binary checkpoints, INI configuration, trading clocks, business-day calendars and CSV column input."""

__version__ = "0.1.0"
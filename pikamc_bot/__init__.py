"""PikaMC server status + AI diagnosis Discord bot."""

__version__ = "1.0.0"

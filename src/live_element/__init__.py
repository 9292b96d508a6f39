"""Wait-and-retry adapter over live browser elements."""

__version__ = "0.3.0"

"""Job matching and bidding core of a cargo shipping marketplace."""

__version__ = "0.1.0"

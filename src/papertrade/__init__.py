"""Paper trading ledger with day-trading compliance and portfolio analytics."""

__version__ = "0.1.0"

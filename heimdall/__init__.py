"""Limit order book matching engine fed by NASDAQ TotalView-ITCH 5.0 data."""

__version__ = "0.1.0"
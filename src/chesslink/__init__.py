"""Chesslink: client core for live online chess matches."""

__version__ = "0.1.0"

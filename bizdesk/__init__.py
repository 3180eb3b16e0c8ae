"""Bizdesk: small-business back office with a reminder notification engine."""

__version__ = "1.0.0"

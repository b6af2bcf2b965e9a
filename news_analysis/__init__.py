"""Batch sentiment and dialect analysis of scraped Arabic news."""

__version__ = "0.1.0"

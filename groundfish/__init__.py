"""Cleaning, wide pivot, co-occurrence and clustering for groundfish observer catch data."""

__version__ = "0.1.0"

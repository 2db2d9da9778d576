"""Embeddable comment service backed by an ordered key-value store."""

__version__ = "1.0.0"

"""Jurisdiction-aware overtime compliance calculator."""

__version__ = "1.0.0"

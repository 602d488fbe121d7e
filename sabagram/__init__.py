"""Sabagram photo-sharing backend and interaction consistency layer."""

__version__ = "0.1.0"

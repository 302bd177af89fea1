"""Configuration package exports."""

from .model import ConnectionSettings, Credentials

__all__ = [
    "ConnectionSettings",
    "Credentials",
]

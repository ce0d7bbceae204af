"""Utility helpers."""

from .http import HTTPClient, redact

__all__ = ["HTTPClient", "redact"]

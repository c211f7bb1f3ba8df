"""Storage failures."""

from __future__ import annotations


class StoreError(Exception):
    """Raised when the durable store cannot be read or written."""

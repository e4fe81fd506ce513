from __future__ import annotations


class InvalidConfiguration(ValueError):
    """Raised when a generator is constructed with unusable parameters."""

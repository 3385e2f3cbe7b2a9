from __future__ import annotations


class StoreError(RuntimeError):
    """Raised when a retailer flow cannot continue."""


class AuthError(StoreError):
    """Raised when the retailer rejects the configured credentials."""

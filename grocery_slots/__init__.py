"""Top-level package for the grocery delivery/collection slot monitor."""

from typing import Any

__all__ = ["TescoStore"]


def __getattr__(name: str) -> Any:
    if name == "TescoStore":
        from grocery_slots.tesco.store import TescoStore as _TescoStore

        return _TescoStore
    raise AttributeError(name)

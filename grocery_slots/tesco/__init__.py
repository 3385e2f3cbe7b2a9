"""Tesco groceries delivery/collection slot checks."""

from grocery_slots.tesco.store import TescoStore

__all__ = ["TescoStore"]

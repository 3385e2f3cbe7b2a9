from __future__ import annotations

from typing import Dict, List, Protocol, Type

from playwright.async_api import Page

from grocery_slots.models import SlotDateResult
from grocery_slots.tesco.store import TescoStore


class SlotStore(Protocol):
    name: str

    async def check_deliveries(self, page: Page) -> List[SlotDateResult]: ...

    async def check_collections(self, page: Page) -> List[SlotDateResult]: ...


STORES: Dict[str, Type[TescoStore]] = {
    "tesco": TescoStore,
}

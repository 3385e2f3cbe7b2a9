from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from grocery_slots.models import Slot
from grocery_slots.tesco import page_selectors as sel
from grocery_slots.tesco.slots import capture_screenshot, extract_slots, parse_slot_cells


class _FakeElement:
    async def screenshot(self) -> bytes:
        return b"matrix-png"


class _FakePage:
    def __init__(self, cells: List[Dict[str, Any]], *, has_matrix: bool = True) -> None:
        self._cells = cells
        self._has_matrix = has_matrix
        self.eval_args: List[tuple] = []
        self.full_page_shots = 0

    async def eval_on_selector_all(self, selector: str, expression: str, arg: Any = None) -> List[Dict[str, Any]]:
        self.eval_args.append((selector, arg))
        if selector != sel.AVAILABLE_SLOT_CELLS:
            return []
        return [dict(cell) for cell in self._cells]

    async def query_selector(self, selector: str) -> Optional[_FakeElement]:
        if selector == sel.SLOT_MATRIX and self._has_matrix:
            return _FakeElement()
        return None

    async def screenshot(self, full_page: bool = False) -> bytes:
        assert full_page is True
        self.full_page_shots += 1
        return b"full-page-png"


def test_cells_missing_an_endpoint_are_dropped() -> None:
    slots = parse_slot_cells(
        [
            {"start": "2020-04-10T09:00:00Z", "end": "2020-04-10T10:00:00Z"},
            {"start": "2020-04-10T10:00:00Z", "end": None},
            {"start": None, "end": "2020-04-10T12:00:00Z"},
            {"start": "", "end": "2020-04-10T13:00:00Z"},
            {},
        ]
    )

    assert slots == [
        Slot(
            start=datetime(2020, 4, 10, 9, tzinfo=timezone.utc),
            end=datetime(2020, 4, 10, 10, tzinfo=timezone.utc),
        )
    ]


def test_unparseable_values_are_dropped_not_defaulted() -> None:
    slots = parse_slot_cells([{"start": "not-a-date", "end": "2020-04-10T10:00:00Z"}])

    assert slots == []


def test_offsets_are_kept_and_naive_values_are_utc() -> None:
    slots = parse_slot_cells(
        [
            {"start": "2020-06-01T09:00:00+01:00", "end": "2020-06-01T10:00:00+01:00"},
            {"start": "2020-06-01T11:00:00", "end": "2020-06-01T12:00:00"},
        ]
    )

    assert slots[0].start.utcoffset() == timedelta(hours=1)
    assert slots[0].start == datetime(2020, 6, 1, 8, tzinfo=timezone.utc)
    assert slots[1].start.tzinfo == timezone.utc


def test_slots_keep_dom_order() -> None:
    cells = [
        {"start": "2020-04-10T15:00:00Z", "end": "2020-04-10T16:00:00Z"},
        {"start": "2020-04-10T09:00:00Z", "end": "2020-04-10T10:00:00Z"},
    ]

    slots = parse_slot_cells(cells)

    assert [slot.start.hour for slot in slots] == [15, 9]


@pytest.mark.asyncio
async def test_extract_slots_reads_available_cells() -> None:
    page = _FakePage(
        [
            {"start": "2020-04-10T09:00:00Z", "end": "2020-04-10T10:00:00Z"},
            {"start": "2020-04-10T10:00:00Z"},
        ]
    )

    slots = await extract_slots(page)

    assert len(slots) == 1
    assert page.eval_args == [(sel.AVAILABLE_SLOT_CELLS, [sel.SLOT_START_INPUT, sel.SLOT_END_INPUT])]


@pytest.mark.asyncio
async def test_extract_slots_is_deterministic() -> None:
    page = _FakePage([{"start": "2020-04-10T09:00:00Z", "end": "2020-04-10T10:00:00Z"}])

    assert await extract_slots(page) == await extract_slots(page)


@pytest.mark.asyncio
async def test_screenshot_prefers_slot_matrix(logger) -> None:
    page = _FakePage([])

    assert await capture_screenshot(page, logger=logger) == b"matrix-png"
    assert page.full_page_shots == 0


@pytest.mark.asyncio
async def test_screenshot_falls_back_to_full_page(logger) -> None:
    page = _FakePage([], has_matrix=False)

    assert await capture_screenshot(page, logger=logger) == b"full-page-png"
    assert page.full_page_shots == 1

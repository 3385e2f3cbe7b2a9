from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from dateutil import parser
from playwright.async_api import Page

from grocery_slots.json_logger import JsonLogger, log_event
from grocery_slots.models import RawSlotCell, Slot
from grocery_slots.tesco import page_selectors as sel

_SLOT_CELLS_JS = """
(elements, [startSelector, endSelector]) => elements.map((element) => {
  const value = (input) => (input ? input.getAttribute("value") : null);
  return {
    start: value(element.querySelector(startSelector)),
    end: value(element.querySelector(endSelector)),
  };
})
"""


def _parse_instant(value: str) -> Optional[datetime]:
    try:
        parsed = parser.isoparse(value)
    except (ValueError, OverflowError):
        try:
            parsed = parser.parse(value)
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_slot(cell: RawSlotCell) -> Optional[Slot]:
    if not cell.start or not cell.end:
        return None
    start = _parse_instant(cell.start)
    end = _parse_instant(cell.end)
    if start is None or end is None:
        return None
    return Slot(start=start, end=end)


def parse_slot_cells(records: Iterable[dict]) -> List[Slot]:
    """Map raw slot cells to slots in DOM order, dropping incomplete cells."""

    slots: List[Slot] = []
    for record in records:
        slot = to_slot(RawSlotCell.model_validate(record))
        if slot is not None:
            slots.append(slot)
    return slots


async def extract_slots(page: Page) -> List[Slot]:
    records = await page.eval_on_selector_all(
        sel.AVAILABLE_SLOT_CELLS,
        _SLOT_CELLS_JS,
        [sel.SLOT_START_INPUT, sel.SLOT_END_INPUT],
    )
    return parse_slot_cells(records)


async def capture_screenshot(page: Page, *, logger: JsonLogger) -> bytes:
    """Screenshot the slot matrix, or the full page when the matrix is absent."""

    element = await page.query_selector(sel.SLOT_MATRIX)
    if element is not None:
        log_event(logger=logger, phase="screenshot", message="Taking slot matrix screenshot")
        return await element.screenshot()

    log_event(
        logger=logger,
        phase="screenshot",
        status="warn",
        message="Slot matrix not found; taking full page screenshot",
        selector=sel.SLOT_MATRIX,
    )
    return await page.screenshot(full_page=True)

from __future__ import annotations

from typing import Iterable, List, Sequence

from playwright.async_api import Page

from grocery_slots.json_logger import JsonLogger, log_event
from grocery_slots.models import DateWindow, Location, RawDateWindow, RawLocation
from grocery_slots.tesco import page_selectors as sel
from grocery_slots.tesco.urls import extract_location_id

# Bounds the crawl to nearby pickup points instead of every store in the country.
DEFAULT_LOCATION_ALLOWLIST = ("crawley", "gatwick", "horsham")

_LOCATIONS_JS = """
(elements, titleClass) => elements.map((item) => {
  const title = item.getElementsByClassName(titleClass)[0];
  return { name: title ? title.textContent : null, url: item.href || null };
})
"""

_DATE_TABS_JS = """
(elements) => elements.map((item) => ({ label: item.textContent, url: item.href || null }))
"""


def is_allowed_location(name: str, allowlist: Iterable[str] = DEFAULT_LOCATION_ALLOWLIST) -> bool:
    lowered = (name or "").lower()
    return any(token.lower() in lowered for token in allowlist if token)


def filter_locations(
    locations: Sequence[Location], allowlist: Iterable[str] = DEFAULT_LOCATION_ALLOWLIST
) -> List[Location]:
    tokens = list(allowlist)
    return [location for location in locations if is_allowed_location(location.name, tokens)]


def parse_locations(records: Iterable[dict], *, logger: JsonLogger) -> List[Location]:
    locations: List[Location] = []
    for record in records:
        raw = RawLocation.model_validate(record)
        location_id = extract_location_id(raw.url or "")
        if not raw.name or not raw.url or location_id is None:
            log_event(
                logger=logger,
                phase="discovery",
                status="warn",
                message="Skipping location without name or numeric locationId",
                raw=record,
            )
            continue
        locations.append(Location(name=raw.name, location_id=location_id, url=raw.url))
    return locations


def parse_date_windows(records: Iterable[dict]) -> List[DateWindow]:
    windows: List[DateWindow] = []
    for record in records:
        raw = RawDateWindow.model_validate(record)
        # label-less tabs are kept; the crawl skips them
        windows.append(DateWindow(label=raw.label or "", url=raw.url or ""))
    return windows


async def discover_locations(
    page: Page, *, logger: JsonLogger, allowlist: Iterable[str] = DEFAULT_LOCATION_ALLOWLIST
) -> List[Location]:
    """Return the pickup points on a collection page that match ``allowlist``."""

    records = await page.eval_on_selector_all(sel.LOCATION_ITEMS, _LOCATIONS_JS, sel.LOCATION_TITLE_CLASS)
    locations = parse_locations(records, logger=logger)
    tokens = list(allowlist)
    allowed = filter_locations(locations, tokens)
    log_event(
        logger=logger,
        phase="discovery",
        message="Discovered collection points",
        found=[location.name for location in locations],
        allowed=[location.name for location in allowed],
        allowlist=tokens,
    )
    return allowed


async def discover_date_windows(page: Page, *, logger: JsonLogger) -> List[DateWindow]:
    records = await page.eval_on_selector_all(sel.DATE_TABS, _DATE_TABS_JS)
    windows = parse_date_windows(records)
    log_event(
        logger=logger,
        phase="discovery",
        message="Discovered date windows",
        windows=[{"label": window.label, "url": window.url} for window in windows],
    )
    return windows

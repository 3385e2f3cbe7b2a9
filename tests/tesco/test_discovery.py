import json
from typing import Any, Dict, List

import pytest

from grocery_slots.models import DateWindow, Location
from grocery_slots.tesco import page_selectors as sel
from grocery_slots.tesco.discovery import (
    DEFAULT_LOCATION_ALLOWLIST,
    discover_date_windows,
    discover_locations,
    filter_locations,
    is_allowed_location,
    parse_locations,
)

BASE = "https://www.tesco.com/groceries/en-GB/slots/collection"


class _FakePage:
    def __init__(self, records: Dict[str, List[Dict[str, Any]]]) -> None:
        self._records = records
        self.calls: List[tuple] = []

    async def eval_on_selector_all(self, selector: str, expression: str, arg: Any = None) -> List[Dict[str, Any]]:
        self.calls.append((selector, arg))
        return [dict(record) for record in self._records.get(selector, [])]


@pytest.mark.parametrize(
    "name",
    ["Crawley Extra", "CRAWLEY", "Gatwick Airport Superstore", "horsham"],
)
def test_allowlist_matches_case_insensitive_substrings(name: str) -> None:
    assert is_allowed_location(name, ["crawley", "gatwick", "horsham"]) is True


@pytest.mark.parametrize("name", ["Brighton Marina Extra", "", "Crawl"])
def test_allowlist_rejects_other_places(name: str) -> None:
    assert is_allowed_location(name) is False


def test_allowlist_entries_are_case_insensitive_too() -> None:
    assert is_allowed_location("crawley extra", ["Crawley"]) is True


def test_filter_locations_preserves_order() -> None:
    locations = [
        Location(name="Horsham Superstore", location_id="3", url=f"{BASE}?locationId=3"),
        Location(name="Brighton Extra", location_id="1", url=f"{BASE}?locationId=1"),
        Location(name="Crawley Extra", location_id="2", url=f"{BASE}?locationId=2"),
    ]

    filtered = filter_locations(locations, DEFAULT_LOCATION_ALLOWLIST)

    assert [location.location_id for location in filtered] == ["3", "2"]


def test_parse_locations_drops_records_without_numeric_id(logger, log_stream) -> None:
    records = [
        {"name": " Crawley Extra \n", "url": f"{BASE}?locationId=2478&postcode=RH10"},
        {"name": "Gatwick", "url": f"{BASE}?postcode=RH6"},
        {"name": None, "url": f"{BASE}?locationId=99"},
    ]

    locations = parse_locations(records, logger=logger)

    assert locations == [
        Location(name="Crawley Extra", location_id="2478", url=f"{BASE}?locationId=2478&postcode=RH10")
    ]
    warnings = [json.loads(line) for line in log_stream.getvalue().splitlines()]
    assert [event["status"] for event in warnings] == ["warn", "warn"]


@pytest.mark.asyncio
async def test_discover_locations_applies_allowlist(logger) -> None:
    page = _FakePage(
        {
            sel.LOCATION_ITEMS: [
                {"name": "Crawley Extra", "url": f"{BASE}?locationId=11"},
                {"name": "Brighton Marina", "url": f"{BASE}?locationId=12"},
                {"name": "Horsham Superstore", "url": f"{BASE}?locationId=13"},
            ]
        }
    )

    locations = await discover_locations(page, logger=logger)

    assert [location.name for location in locations] == ["Crawley Extra", "Horsham Superstore"]
    assert page.calls == [(sel.LOCATION_ITEMS, sel.LOCATION_TITLE_CLASS)]


@pytest.mark.asyncio
async def test_discover_locations_with_custom_allowlist(logger) -> None:
    page = _FakePage({sel.LOCATION_ITEMS: [{"name": "Brighton Marina", "url": f"{BASE}?locationId=12"}]})

    locations = await discover_locations(page, logger=logger, allowlist=["brighton"])

    assert [location.location_id for location in locations] == ["12"]


@pytest.mark.asyncio
async def test_discover_locations_empty_page(logger) -> None:
    assert await discover_locations(_FakePage({}), logger=logger) == []


@pytest.mark.asyncio
async def test_discover_date_windows_keeps_empty_labels(logger) -> None:
    page = _FakePage(
        {
            sel.DATE_TABS: [
                {"label": "6 Apr - 12 Apr", "url": f"{BASE}/2020-04-06?locationId=1"},
                {"label": "  ", "url": f"{BASE}/2020-04-13?locationId=1"},
                {"label": None, "url": None},
            ]
        }
    )

    windows = await discover_date_windows(page, logger=logger)

    assert windows == [
        DateWindow(label="6 Apr - 12 Apr", url=f"{BASE}/2020-04-06?locationId=1"),
        DateWindow(label="", url=f"{BASE}/2020-04-13?locationId=1"),
        DateWindow(label="", url=""),
    ]

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from playwright.async_api import Page

from grocery_slots.browser import NAV_TIMEOUT_MS, goto
from grocery_slots.config import Config
from grocery_slots.cookie_store import CookieStore
from grocery_slots.json_logger import JsonLogger, get_logger, log_event, timed_event
from grocery_slots.models import DateWindow, Location, SlotCandidate, SlotDateResult, SlotDateResults
from grocery_slots.tesco.discovery import (
    DEFAULT_LOCATION_ALLOWLIST,
    discover_date_windows,
    discover_locations,
)
from grocery_slots.tesco.session import AuthSession
from grocery_slots.tesco.slots import capture_screenshot, extract_slots
from grocery_slots.tesco.urls import COLLECTION_URL, DELIVERY_URL, rewrite_location_id


def build_candidates(locations: Sequence[Location], windows: Sequence[DateWindow]) -> List[SlotCandidate]:
    """Cross every location with every date window, locations outermost."""

    candidates: List[SlotCandidate] = []
    for location in locations:
        for window in windows:
            candidates.append(
                SlotCandidate(
                    label=f"{location.name} {window.label}",
                    url=rewrite_location_id(window.url, location.location_id),
                    date_label=window.label,
                )
            )
    return candidates


class TescoStore:
    name = "Tesco"

    def __init__(
        self,
        username: str,
        password: str,
        *,
        cookie_store: Optional[CookieStore] = None,
        logger: Optional[JsonLogger] = None,
        location_allowlist: Iterable[str] = DEFAULT_LOCATION_ALLOWLIST,
        nav_timeout_ms: int = NAV_TIMEOUT_MS,
    ) -> None:
        self.logger = (logger or get_logger()).bind(store=self.name)
        self.location_allowlist = list(location_allowlist)
        self.nav_timeout_ms = nav_timeout_ms
        self.session = AuthSession(
            username,
            password,
            cookie_store=cookie_store or CookieStore(),
            logger=self.logger,
            nav_timeout_ms=nav_timeout_ms,
        )

    @classmethod
    def from_config(cls, app_config: Config, *, logger: Optional[JsonLogger] = None) -> "TescoStore":
        return cls(
            app_config.tesco_username,
            app_config.tesco_password,
            cookie_store=CookieStore(app_config.cookie_store_path),
            logger=logger,
            location_allowlist=app_config.location_allowlist,
            nav_timeout_ms=app_config.nav_timeout_ms,
        )

    async def check_deliveries(self, page: Page) -> List[SlotDateResult]:
        with timed_event(logger=self.logger, phase="crawl", message="Delivery check", mode="delivery"):
            await self.session.start(page, DELIVERY_URL)
            return await self.get_slots(page)

    async def check_collections(self, page: Page) -> List[SlotDateResult]:
        with timed_event(logger=self.logger, phase="crawl", message="Collection check", mode="collection"):
            await self.session.start(page, COLLECTION_URL)
            return await self.get_slots(page)

    async def get_slots(self, page: Page) -> List[SlotDateResult]:
        locations = await discover_locations(page, logger=self.logger, allowlist=self.location_allowlist)
        windows = await discover_date_windows(page, logger=self.logger)
        candidates = build_candidates(locations, windows)

        log_event(logger=self.logger, phase="crawl", message="Built slot candidates", candidate_count=len(candidates))

        found = SlotDateResults()
        for candidate in candidates:
            if not candidate.date_label or not candidate.url:
                log_event(
                    logger=self.logger,
                    phase="crawl",
                    message="Skipping date tab without label",
                    label=candidate.label,
                    url=candidate.url,
                )
                continue

            log_event(logger=self.logger, phase="crawl", message="Opening slot page", label=candidate.label, url=candidate.url)
            await goto(page, candidate.url, timeout_ms=self.nav_timeout_ms)

            slots = await extract_slots(page)
            if not slots:
                log_event(logger=self.logger, phase="crawl", message="No slots", label=candidate.label)
                continue

            log_event(
                logger=self.logger,
                phase="crawl",
                message="Slots available",
                label=candidate.label,
                slot_count=len(slots),
            )
            found.add(candidate.label, slots, await capture_screenshot(page, logger=self.logger))

        return found.results

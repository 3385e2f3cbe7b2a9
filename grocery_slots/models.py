from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


# ── Raw DOM records ──────────────────────────────────────────────────────────
# Shapes returned by ``page.eval_on_selector_all``. Every field is optional
# because the rendered markup varies; typed models are built from these only
# when the required fields are present.


class RawRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class RawLocation(RawRecord):
    name: Optional[str] = None
    url: Optional[str] = None


class RawDateWindow(RawRecord):
    label: Optional[str] = None
    url: Optional[str] = None


class RawSlotCell(RawRecord):
    start: Optional[str] = None
    end: Optional[str] = None


# ── Crawl model ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    name: str
    location_id: str
    url: str


@dataclass(frozen=True)
class DateWindow:
    label: str
    url: str


@dataclass(frozen=True)
class SlotCandidate:
    label: str
    url: str
    date_label: str


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime


@dataclass
class SlotDateResult:
    label: str
    slots: List[Slot]
    screenshot: bytes = field(repr=False)


class SlotDateResults:
    """Collect per-date-window results in visit order, ignoring empty groups."""

    def __init__(self) -> None:
        self._results: List[SlotDateResult] = []

    def add(self, label: str, slots: List[Slot], screenshot: bytes) -> SlotDateResult | None:
        if not slots:
            return None
        result = SlotDateResult(label=label, slots=list(slots), screenshot=screenshot)
        self._results.append(result)
        return result

    @property
    def results(self) -> List[SlotDateResult]:
        return list(self._results)

    def __len__(self) -> int:
        return len(self._results)

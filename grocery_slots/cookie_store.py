"""Persistence for the browser cookies of one authenticated session."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

Cookie = Dict[str, Any]


class CookieStore:
    """Hold one complete cookie set, optionally mirrored to a JSON file.

    The set is replaced wholesale by :meth:`save` and removed entirely by
    ``save(None)``; nothing ever merges into an existing set. Without a path
    the store lives only in memory for the lifetime of the process.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path).expanduser() if path else None
        self._cookies: Optional[List[Cookie]] = None
        self._loaded = False

    def load(self) -> Optional[List[Cookie]]:
        if not self._loaded:
            self._cookies = self._read()
            self._loaded = True
        return list(self._cookies) if self._cookies else None

    def save(self, cookies: Optional[List[Cookie]]) -> None:
        self._cookies = list(cookies) if cookies else None
        self._loaded = True
        if self.path is None:
            return
        if self._cookies is None:
            self.path.unlink(missing_ok=True)
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._cookies, indent=2), encoding="utf-8")

    def _read(self) -> Optional[List[Cookie]]:
        if self.path is None or not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            return None
        if not isinstance(raw, list):
            return None
        cookies = [item for item in raw if isinstance(item, dict)]
        if len(cookies) != len(raw):
            return None
        return cookies or None

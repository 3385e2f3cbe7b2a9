"""Structured JSON logger for slot checks."""
from __future__ import annotations

import json
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Dict, Iterator, Optional, TextIO

__all__ = ["JsonLogger", "get_logger", "log_event", "timed_event", "new_run_id"]


def new_run_id() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S%f")


def _open_mirror(raw_path: str | None) -> IO[str] | None:
    if not raw_path or not raw_path.strip():
        return None
    path = Path(raw_path).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return open(path, "a", encoding="utf-8")


class JsonLogger:
    """Write one JSON object per event to a stream, optionally mirrored to a file.

    Child loggers from :meth:`bind` share the parent's outputs and closed state;
    only the root logger owns and closes the mirror file.
    """

    def __init__(
        self,
        run_id: Optional[str] = None,
        stream: TextIO | None = None,
        *,
        log_file_path: str | None = None,
    ) -> None:
        self.run_id = run_id or new_run_id()
        self.stream = stream or sys.stdout
        self.context: Dict[str, Any] = {"run_id": self.run_id}
        self._mirror = _open_mirror(log_file_path)
        self._root = self
        self._closed = False

    def bind(self, **fields: Any) -> "JsonLogger":
        child = JsonLogger(run_id=self.run_id, stream=self.stream)
        child.context = {**self.context, **fields}
        child._mirror = self._mirror
        child._root = self._root
        return child

    @property
    def closed(self) -> bool:
        return self._root._closed

    def info(self, *, phase: str, status: str = "ok", message: str = "", **fields: Any) -> None:
        if self.closed:
            return
        event = {**self.context, "phase": phase, "status": status, "message": message, **fields}
        event.setdefault("ts", datetime.now(timezone.utc).isoformat())
        line = json.dumps(event, default=str, ensure_ascii=False) + "\n"
        for sink in (self.stream, self._mirror):
            if sink is not None:
                sink.write(line)
                sink.flush()

    def error(self, *, phase: str, message: str, **fields: Any) -> None:
        self.info(phase=phase, status="error", message=message, **fields)

    def close(self) -> None:
        if self._root is not self or self._closed:
            return
        self._closed = True
        if self._mirror is not None:
            self._mirror.close()
            self._mirror = None


def get_logger(run_id: Optional[str] = None, *, log_file_path: str | None = None) -> JsonLogger:
    return JsonLogger(run_id=run_id, log_file_path=log_file_path)


def log_event(*, logger: JsonLogger, phase: str, status: str = "ok", message: str = "", **extras: Any) -> None:
    logger.info(phase=phase, status=status, message=message, **extras)


@contextmanager
def timed_event(*, logger: JsonLogger, phase: str, message: str = "", **fields: Any) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    except Exception as exc:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.error(phase=phase, message=f"{message} failed: {exc}", duration_ms=elapsed_ms, **fields)
        raise
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    logger.info(phase=phase, message=message, duration_ms=elapsed_ms, **fields)

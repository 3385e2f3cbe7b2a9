from __future__ import annotations

import argparse
import asyncio
import contextlib
import re
from pathlib import Path
from typing import Dict, List, Sequence

from playwright.async_api import Page, async_playwright

from grocery_slots.browser import launch_browser
from grocery_slots.config import Config, ConfigError, get_config
from grocery_slots.errors import StoreError
from grocery_slots.json_logger import JsonLogger, get_logger, log_event, new_run_id
from grocery_slots.models import SlotDateResult
from grocery_slots.stores import STORES, SlotStore

CHECKS = {
    "deliveries": ("delivery",),
    "collections": ("collection",),
    "all": ("delivery", "collection"),
}


def _slugify(label: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", label).strip("-").lower()
    return slug or "slots"


async def run_checks(
    *, store: SlotStore, page: Page, modes: Sequence[str], logger: JsonLogger
) -> Dict[str, List[SlotDateResult]]:
    """Run each requested check on the same page, one after the other."""

    results: Dict[str, List[SlotDateResult]] = {}
    for mode in modes:
        if mode == "delivery":
            results[mode] = await store.check_deliveries(page)
        elif mode == "collection":
            results[mode] = await store.check_collections(page)
        else:
            raise ValueError(f"Unknown check mode: {mode}")
        log_results(logger=logger, mode=mode, results=results[mode])
    return results


def log_results(*, logger: JsonLogger, mode: str, results: Sequence[SlotDateResult]) -> None:
    if not results:
        log_event(logger=logger, phase="results", message="No slots found", mode=mode)
        return
    for result in results:
        log_event(
            logger=logger,
            phase="results",
            message="Slots found",
            mode=mode,
            label=result.label,
            slot_count=len(result.slots),
            first_slot=result.slots[0].start.isoformat(),
            last_slot=result.slots[-1].end.isoformat(),
        )


def write_screenshots(
    results: Dict[str, List[SlotDateResult]], directory: Path, *, run_id: str
) -> List[Path]:
    directory.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for mode, mode_results in results.items():
        for index, result in enumerate(mode_results, start=1):
            path = directory / f"{run_id}_{mode}_{index:02d}_{_slugify(result.label)}.png"
            path.write_bytes(result.screenshot)
            written.append(path)
    return written


async def _run_with_browser(
    *, args: argparse.Namespace, app_config: Config, logger: JsonLogger
) -> Dict[str, List[SlotDateResult]]:
    async with async_playwright() as playwright:
        browser = await launch_browser(
            playwright=playwright,
            logger=logger,
            headless=app_config.browser_headless and not args.headed,
            chrome_executable=app_config.chrome_executable,
        )
        try:
            context = await browser.new_context()
            page = await context.new_page()
            store = STORES[args.store].from_config(app_config, logger=logger)
            return await run_checks(store=store, page=page, modes=CHECKS[args.check], logger=logger)
        finally:
            with contextlib.suppress(Exception):
                await browser.close()


async def _run_async(args: argparse.Namespace) -> int:
    run_id = args.run_id or new_run_id()
    try:
        app_config = get_config()
    except ConfigError as exc:
        fallback = JsonLogger(run_id=run_id)
        log_event(logger=fallback, phase="init", status="error", message=str(exc))
        fallback.close()
        return 2

    logger = get_logger(run_id=run_id, log_file_path=app_config.json_log_file or None)
    try:
        log_event(logger=logger, phase="init", message="Starting slot check", store=args.store, check=args.check)
        results = await _run_with_browser(args=args, app_config=app_config, logger=logger)
        if args.screenshot_dir:
            written = write_screenshots(results, Path(args.screenshot_dir), run_id=run_id)
            log_event(logger=logger, phase="results", message="Saved screenshots", paths=[str(p) for p in written])
        log_event(
            logger=logger,
            phase="results",
            message="Slot check complete",
            date_groups={mode: len(mode_results) for mode, mode_results in results.items()},
        )
        return 0
    except StoreError as exc:
        log_event(logger=logger, phase="results", status="error", message=str(exc))
        return 1
    except Exception as exc:
        log_event(logger=logger, phase="results", status="error", message="Slot check failed", error=repr(exc))
        raise
    finally:
        logger.close()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grocery_slots", description="Check grocery delivery/collection slots")
    parser.add_argument("check", choices=sorted(CHECKS), help="Which slot pages to crawl")
    parser.add_argument("--store", dest="store", choices=sorted(STORES), default="tesco", help="Retailer to check")
    parser.add_argument("--run-id", dest="run_id", type=str, default=None, help="Override generated run id")
    parser.add_argument(
        "--screenshot-dir",
        dest="screenshot_dir",
        type=str,
        default=None,
        help="Write this run's slot screenshots to the given directory",
    )
    parser.add_argument("--headed", dest="headed", action="store_true", help="Show the browser window")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    return asyncio.run(_run_async(args))

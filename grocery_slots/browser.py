from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from playwright.async_api import Browser, Page

from grocery_slots.json_logger import JsonLogger, log_event

NAV_TIMEOUT_MS = 60_000


async def launch_browser(
    *,
    playwright: Any,
    logger: JsonLogger,
    headless: bool = True,
    chrome_executable: str | None = None,
) -> Browser:
    chrome_exec = (chrome_executable or "").strip() or None
    launch_kwargs: Dict[str, Any] = {"headless": headless}

    if chrome_exec and Path(chrome_exec).is_file():
        launch_kwargs["executable_path"] = chrome_exec
        log_event(
            logger=logger,
            phase="init",
            message="Launching Playwright with local Chrome executable",
            executable_path=chrome_exec,
            headless=headless,
        )
    elif chrome_exec:
        log_event(
            logger=logger,
            phase="init",
            status="warn",
            message="Configured local Chrome executable missing; falling back to bundled Chromium",
            executable_path=chrome_exec,
            headless=headless,
        )
    else:
        log_event(
            logger=logger,
            phase="init",
            message="Launching Playwright with bundled Chromium",
            headless=headless,
        )

    try:
        return await playwright.chromium.launch(**launch_kwargs)
    except Exception as exc:
        if launch_kwargs.pop("executable_path", None) is not None:
            log_event(
                logger=logger,
                phase="init",
                status="warn",
                message="Local Chrome launch failed; retrying with bundled Chromium",
                executable_path=chrome_exec,
                headless=headless,
                error=str(exc),
            )
            return await playwright.chromium.launch(**launch_kwargs)
        raise


async def goto(page: Page, url: str, *, timeout_ms: int = NAV_TIMEOUT_MS) -> None:
    """Navigate and wait for the network to settle; errors propagate to the caller."""

    await page.goto(url, wait_until="networkidle", timeout=timeout_ms)


async def click_and_wait_for_navigation(
    page: Page, selector: str, *, timeout_ms: int = NAV_TIMEOUT_MS
) -> None:
    async with page.expect_navigation(wait_until="networkidle", timeout=timeout_ms):
        await page.click(selector)

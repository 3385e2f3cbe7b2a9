"""Authenticated session handling for the Tesco groceries site.

A stored cookie set is tried first. When the retailer bounces the target page
to the login URL the cookies are cleared from both the browser context and the
store, and a fresh login is performed. Login failures are terminal and raise
:class:`~grocery_slots.errors.AuthError`.
"""
from __future__ import annotations

from playwright.async_api import Page

from grocery_slots.browser import NAV_TIMEOUT_MS, click_and_wait_for_navigation, goto
from grocery_slots.cookie_store import CookieStore
from grocery_slots.errors import AuthError
from grocery_slots.json_logger import JsonLogger, log_event
from grocery_slots.tesco import page_selectors as sel
from grocery_slots.tesco.urls import is_login_url, login_url_for

GENERIC_AUTH_FAILURE = "Auth failed. Please check the configured Tesco username and password are correct"


async def assert_login_success(page: Page) -> None:
    if not is_login_url(page.url):
        return

    error_element = await page.query_selector(sel.LOGIN_ERROR_TEXT)
    if error_element is not None:
        error_text = (await error_element.inner_text()).strip()
        raise AuthError(f"{GENERIC_AUTH_FAILURE}, with reason: {error_text}")
    raise AuthError(GENERIC_AUTH_FAILURE)


class AuthSession:
    def __init__(
        self,
        username: str,
        password: str,
        *,
        cookie_store: CookieStore,
        logger: JsonLogger,
        nav_timeout_ms: int = NAV_TIMEOUT_MS,
    ) -> None:
        self.username = username
        self.password = password
        self.cookie_store = cookie_store
        self.logger = logger
        self.nav_timeout_ms = nav_timeout_ms

    async def login(self, page: Page, target_url: str) -> None:
        log_event(logger=self.logger, phase="login", message="Logging in with new user session")

        await goto(page, login_url_for(target_url), timeout_ms=self.nav_timeout_ms)
        await page.fill(sel.LOGIN_USERNAME, self.username)
        await page.fill(sel.LOGIN_PASSWORD, self.password)
        await click_and_wait_for_navigation(page, sel.LOGIN_SUBMIT, timeout_ms=self.nav_timeout_ms)
        try:
            await assert_login_success(page)
        except AuthError as exc:
            log_event(
                logger=self.logger,
                phase="login",
                status="error",
                message="Login rejected",
                final_url=page.url,
                error=str(exc),
            )
            raise

        # overwrite, never merge: the store only ever holds one whole session
        self.cookie_store.save(await page.context.cookies())
        log_event(logger=self.logger, phase="login", message="Login succeeded; session stored", final_url=page.url)

    async def start(self, page: Page, target_url: str) -> None:
        cookies = self.cookie_store.load()
        if cookies:
            await page.context.add_cookies(cookies)
            # optimistically open the target in case the stored session is still live
            await goto(page, target_url, timeout_ms=self.nav_timeout_ms)

            if is_login_url(page.url):
                await page.context.clear_cookies()
                self.cookie_store.save(None)
                log_event(
                    logger=self.logger,
                    phase="session",
                    status="warn",
                    message="Stored session rejected; cookies cleared",
                    final_url=page.url,
                )
            else:
                log_event(logger=self.logger, phase="session", message="Already logged in", final_url=page.url)

        if not self.cookie_store.load():
            await self.login(page, target_url)

        # login should redirect to the target, but check just in case it hasn't
        if not page.url.startswith(target_url):
            log_event(
                logger=self.logger,
                phase="session",
                message="Revisiting intended page",
                current_url=page.url,
                target_url=target_url,
            )
            await goto(page, target_url, timeout_ms=self.nav_timeout_ms)

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import re
import threading
from typing import Awaitable, Optional, TypeVar

from playwright.async_api import Browser, Error as PlaywrightError, Playwright, async_playwright

from ..errors import CaptureError

log = logging.getLogger(__name__)

T = TypeVar("T")

CHROMIUM_ARGS = ["--disable-gpu", "--no-sandbox"]
_HEAD_RE = re.compile(r"<head[^>]*>", re.IGNORECASE)


def inject_base_href(html: str, base_url: Optional[str]) -> str:
    """Make relative asset links resolve against the running server."""
    if not base_url:
        return html
    tag = f'<base href="{base_url.rstrip("/")}/">'
    match = _HEAD_RE.search(html)
    if match is None:
        return tag + html
    return html[: match.end()] + tag + html[match.end() :]


class CaptureBackend:
    @property
    def started(self) -> bool:
        return True

    def capture(self, html: str, width: int, height: int) -> bytes:
        raise NotImplementedError


class BrowserCapture(CaptureBackend):
    """Headless Chromium shared by all requests.

    Playwright runs on a private event loop in its own thread, so request
    threads can submit captures concurrently; each capture gets a fresh page.
    Call ``start`` once before use and ``close`` on shutdown.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30.0) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def started(self) -> bool:
        return self._browser is not None

    def __enter__(self) -> "BrowserCapture":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def start(self) -> None:
        if self.started:
            return
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, name="inkdash-capture", daemon=True)
        self._thread.start()
        try:
            self._run(self._start_async())
        except Exception:
            self._stop_loop()
            raise
        log.info("Capture backend started")

    def close(self) -> None:
        if self._loop is None:
            return
        try:
            self._run(self._close_async())
        finally:
            self._stop_loop()
        log.info("Capture backend closed")

    def capture(self, html: str, width: int, height: int) -> bytes:
        """Render the page at the given viewport and return a PNG screenshot."""
        if not self.started:
            raise CaptureError("capture backend not started")
        return self._run(self._capture_async(inject_base_href(html, self._base_url), width, height))

    def _run(self, coro: Awaitable[T]) -> T:
        if self._loop is None:
            raise CaptureError("capture backend not started")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        try:
            return future.result(timeout=self._timeout + 5)
        except concurrent.futures.TimeoutError as exc:
            future.cancel()
            raise CaptureError(f"Capture timed out after {self._timeout:.0f}s") from exc
        except PlaywrightError as exc:
            raise CaptureError(f"Browser capture failed: {exc}") from exc

    async def _start_async(self) -> None:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=True, args=CHROMIUM_ARGS)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise

    async def _close_async(self) -> None:
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        try:
            if browser is not None:
                await browser.close()
        finally:
            if playwright is not None:
                await playwright.stop()

    async def _capture_async(self, html: str, width: int, height: int) -> bytes:
        browser = self._browser
        if browser is None:
            raise CaptureError("capture backend not started")
        page = await browser.new_page(viewport={"width": width, "height": height}, device_scale_factor=1)
        try:
            page.set_default_timeout(self._timeout * 1000)
            await page.set_content(html, wait_until="networkidle")
            return await page.screenshot(type="png", full_page=False)
        finally:
            await page.close()

    def _stop_loop(self) -> None:
        loop, self._loop = self._loop, None
        thread, self._thread = self._thread, None
        if loop is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=5)
        loop.close()

from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from app.application.exceptions import SessionNotInitializedError

logger = logging.getLogger(__name__)


class BrowserSession(AbstractAsyncContextManager["BrowserSession"]):
    """One Chromium instance with a clean context and a single page, used for exactly one booking."""

    def __init__(
        self,
        *,
        headless: bool = True,
        timeout: float = 30.0,
        viewport: tuple[int, int] = (1280, 800),
    ) -> None:
        self._headless = headless
        self._timeout = timeout
        self._viewport = viewport
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "BrowserSession":
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self._headless)
            width, height = self._viewport
            self._context = await self._browser.new_context(viewport={"width": width, "height": height})
            self._page = await self._context.new_page()
            self._page.set_default_timeout(self._timeout * 1000)
        except BaseException:
            await self.close()
            raise
        logger.debug("Browser session opened", extra={"headless": self._headless})
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.close()

    @property
    def page(self) -> Page:
        if self._page is None:
            raise SessionNotInitializedError("Browser page is not available outside an open session.")
        return self._page

    @property
    def is_open(self) -> bool:
        return self._page is not None

    async def close(self) -> None:
        """Close page, context, browser and the Playwright driver."""
        async with self._lock:
            if self._page is not None:
                await self._page.close()
                self._page = None
            if self._context is not None:
                await self._context.close()
                self._context = None
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
        logger.debug("Browser session closed")

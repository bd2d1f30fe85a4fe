from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Protocol

from playwright.async_api import Browser, Page, async_playwright

from .config import AppConfig
from .models import Message, Role


logger = logging.getLogger(__name__)

EXTRACT_MESSAGES_JS = """
nodes => nodes.map(node => ({
  role: node.getAttribute('data-message-author-role'),
  html: node.innerHTML
}))
"""


class BrowserDriver(Protocol):
    async def navigate(self, url: str, timeout_ms: int) -> None:  # pragma: no cover - interface
        ...

    async def wait_for_content(self, selector: str, timeout_ms: int) -> None:  # pragma: no cover - interface
        ...

    async def extract_messages(self, selector: str) -> list[Message]:  # pragma: no cover - interface
        ...

    async def title(self) -> str:  # pragma: no cover - interface
        ...


class PlaywrightDriver:
    """Drives a single Chromium page through the Playwright async API."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def navigate(self, url: str, timeout_ms: int) -> None:
        # A fast DOM load first, then wait for the network to settle.
        await self._page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms / 2)
        await self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)

    async def wait_for_content(self, selector: str, timeout_ms: int) -> None:
        await self._page.wait_for_selector(selector, timeout=timeout_ms)

    async def extract_messages(self, selector: str) -> list[Message]:
        raw = await self._page.eval_on_selector_all(selector, EXTRACT_MESSAGES_JS)
        return [Message(role=Role.parse(item.get("role")), html=item.get("html") or "") for item in raw]

    async def title(self) -> str:
        return await self._page.title()


@asynccontextmanager
async def launch_driver(config: AppConfig) -> AsyncIterator[PlaywrightDriver]:
    async with async_playwright() as playwright:
        browser: Browser = await playwright.chromium.launch(headless=config.runtime.headless)
        logger.debug("Launched Chromium (headless=%s)", config.runtime.headless)
        try:
            page = await browser.new_page(user_agent=config.runtime.user_agent)
            yield PlaywrightDriver(page)
        finally:
            await browser.close()


__all__ = ["BrowserDriver", "PlaywrightDriver", "launch_driver"]

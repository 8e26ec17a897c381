# AKCM Playwright Binding
# HostPage implementation over a Chromium tab reached through CDP

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Optional

from playwright.async_api import ElementHandle, Page, async_playwright

from akcm.adapters.page import url_matches
from akcm.reconcile.errors import PreflightError


class PlaywrightElement:
    """HostElement backed by a Playwright element handle."""

    def __init__(self, handle: ElementHandle):
        self.handle = handle

    async def click(self) -> None:
        await self.handle.click()

    async def get_attribute(self, name: str) -> Optional[str]:
        return await self.handle.get_attribute(name)

    async def is_checked(self) -> bool:
        return await self.handle.evaluate("(el) => Boolean(el.checked)")

    async def text_content(self) -> str:
        return await self.handle.text_content() or ""

    async def closest(self, selector: str) -> Optional[PlaywrightElement]:
        result = await self.handle.evaluate_handle("(el, s) => el.closest(s)", selector)
        element = result.as_element()
        return PlaywrightElement(element) if element is not None else None

    async def query(self, selector: str) -> Optional[PlaywrightElement]:
        element = await self.handle.query_selector(selector)
        return PlaywrightElement(element) if element is not None else None

    async def query_all(self, selector: str) -> list[PlaywrightElement]:
        return [PlaywrightElement(e) for e in await self.handle.query_selector_all(selector)]

    async def scroll_into_view(self) -> None:
        await self.handle.evaluate("(el) => el.scrollIntoView({block: 'center', behavior: 'instant'})")


class PlaywrightHostPage:
    """HostPage backed by a Playwright page."""

    def __init__(self, page: Page):
        self.page = page

    @property
    def url(self) -> str:
        return self.page.url

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        return await self.page.evaluate(expression, arg)

    async def query(self, selector: str) -> Optional[PlaywrightElement]:
        element = await self.page.query_selector(selector)
        return PlaywrightElement(element) if element is not None else None

    async def query_all(self, selector: str) -> list[PlaywrightElement]:
        return [PlaywrightElement(e) for e in await self.page.query_selector_all(selector)]


@asynccontextmanager
async def connect_host_page(cdp_endpoint: str, url_patterns: list[str]) -> AsyncIterator[PlaywrightHostPage]:
    """
    Attach to a running Chromium and yield the dashboard tab.

    The browser is not closed on exit; only the CDP connection is dropped.

    Args:
        cdp_endpoint: Remote debugging endpoint, e.g. ``http://localhost:9222``.
        url_patterns: A tab is picked if its URL contains any of these.

    Yields:
        PlaywrightHostPage for the first matching tab.

    Raises:
        PreflightError: If no open tab shows the dashboard.
    """
    async with async_playwright() as pw:
        browser = await pw.chromium.connect_over_cdp(cdp_endpoint)
        pages = [page for context in browser.contexts for page in context.pages]
        match = next((page for page in pages if url_matches(page.url, url_patterns)), None)
        if match is None:
            raise PreflightError(
                "No open tab shows the parent dashboard. "
                "Open parents.amazon.com and navigate to the content list first."
            )
        yield PlaywrightHostPage(match)

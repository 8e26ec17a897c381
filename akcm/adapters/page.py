# AKCM Host Page Helpers
# Selectors, page-mode detection and element lookups shared by adapters

from typing import Optional

from akcm.adapters.base import HostElement, HostPage, PageMode

SWITCH_SELECTOR = 'input[role="switch"]'
ACCESS_BUTTON_SELECTOR = ".allowlist-count"
CARD_SELECTOR = ".content-card-clickable"
CARD_FALLBACK_SELECTOR = '[class*="content-card"]'
PANEL_CONTAINER_SELECTORS = (".panda-site-sheet-container", '[role="dialog"]')
PANEL_SWITCH_SELECTOR = (
    '[role="dialog"] input[role="switch"], .panda-site-sheet-container input[role="switch"]'
)


def control_selector(mode: PageMode) -> str:
    """Selector of the per-card control for a page mode."""
    if mode == PageMode.CHILD_SELECTED:
        return SWITCH_SELECTOR
    return ACCESS_BUTTON_SELECTOR


async def detect_page_mode(page: HostPage) -> Optional[PageMode]:
    """
    Detect which dashboard layout is rendered.

    Args:
        page: Host page.

    Returns:
        PageMode, or None when no content cards are present.
    """
    if await page.query_all(SWITCH_SELECTOR):
        return PageMode.CHILD_SELECTED
    if await page.query_all(ACCESS_BUTTON_SELECTOR):
        return PageMode.NO_CHILD_SELECTED
    return None


async def find_card(control: HostElement) -> Optional[HostElement]:
    """Content card enclosing a control."""
    card = await control.closest(CARD_SELECTOR)
    if card is None:
        card = await control.closest(CARD_FALLBACK_SELECTOR)
    return card


async def find_button(page: HostPage, text: str, *, exact: bool = False) -> Optional[HostElement]:
    """
    Find the first button whose text matches.

    Args:
        page: Host page.
        text: Text to look for.
        exact: Require the trimmed text to equal ``text``; otherwise a
            case-insensitive substring match is used.

    Returns:
        Matching element or None.
    """
    for button in await page.query_all("button"):
        content = (await button.text_content() or "").strip()
        if exact and content == text:
            return button
        if not exact and text.lower() in content.lower():
            return button
    return None


async def find_panel_container(page: HostPage) -> Optional[HostElement]:
    """The open manage-access sheet, if any."""
    for selector in PANEL_CONTAINER_SELECTORS:
        container = await page.query(selector)
        if container is not None:
            return container
    return None


def url_matches(url: str, patterns: list[str]) -> bool:
    """True if the URL contains any of the host patterns."""
    return any(pattern in url for pattern in patterns)

# AKCM Markup Reader
# Scrapes item attributes from rendered aria-labels

import re
from typing import Optional

from akcm.adapters.base import HostPage, PageMode
from akcm.adapters.page import ACCESS_BUTTON_SELECTOR, SWITCH_SELECTOR, find_card
from akcm.config.schema import Category
from akcm.reconcile.item import Item

_LEADING_INT = re.compile(r"\s*(\d+)")


def parse_switch_label(label: str) -> tuple[str, str]:
    """
    Split an inline switch label into title and content type.

    Format: ``"Title, TYPE"``. Titles may themselves contain commas, so the
    split happens on the last ", ".

    Returns:
        Tuple of (title, content_type).
    """
    title, sep, content_type = label.rpartition(", ")
    if not sep:
        return label, "UNKNOWN"
    return title, content_type


def parse_access_label(label: str) -> tuple[str, str]:
    """
    Split an access-button label into title and content type.

    Format: ``"Title, Type, N children have access"``.

    Returns:
        Tuple of (title, content_type).
    """
    parts = label.split(", ")
    if len(parts) >= 3:
        return ", ".join(parts[:-2]), parts[-2]
    return parts[0] if parts else "", "UNKNOWN"


def parse_access_count(text: str) -> int:
    """Leading integer of an access-count badge, 0 if none."""
    match = _LEADING_INT.match(text or "")
    return int(match.group(1)) if match else 0


class MarkupItemSource:
    """
    Rendered-markup strategy for reading dashboard items.

    Never has item ids, so dedup falls back to titles.
    """

    def __init__(self, page: HostPage, mode: PageMode):
        self.page = page
        self.mode = mode

    async def read_items(self) -> Optional[list[Item]]:
        """Read the current page's items from markup."""
        if self.mode == PageMode.CHILD_SELECTED:
            return await self._read_switches()
        return await self._read_access_buttons()

    async def _read_switches(self) -> list[Item]:
        items: list[Item] = []
        for switch in await self.page.query_all(SWITCH_SELECTOR):
            title, content_type = parse_switch_label(await switch.get_attribute("aria-label") or "")
            items.append(
                Item(
                    title=title,
                    category=Category.parse(content_type),
                    current_state=await switch.is_checked(),
                    handles={"switch": switch, "card": await find_card(switch)},
                )
            )
        return items

    async def _read_access_buttons(self) -> list[Item]:
        items: list[Item] = []
        for button in await self.page.query_all(ACCESS_BUTTON_SELECTOR):
            title, content_type = parse_access_label(await button.get_attribute("aria-label") or "")
            count = parse_access_count(await button.text_content())
            items.append(
                Item(
                    title=title,
                    category=Category.parse(content_type),
                    # Rough heuristic: any child with access counts as enabled
                    current_state=count > 0,
                    handles={"access_button": button, "card": await find_card(button)},
                )
            )
        return items

    async def read_pagination_flags(self) -> Optional[tuple[Optional[bool], bool]]:
        """Markup carries no pagination flags; the show-more button decides."""
        return None

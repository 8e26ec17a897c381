# AKCM Dashboard Item Source
# Structured-state reader with a latching fallback to markup scraping

from __future__ import annotations

from typing import Optional, Protocol

from akcm.adapters.base import HostPage, PageMode, PaginationState
from akcm.adapters.page import control_selector, find_button
from akcm.reconcile.item import Item
from akcm.reconcile.reporting import NullReporter, Reporter


class ItemReader(Protocol):
    """One strategy for reading items off the page."""

    async def read_items(self) -> Optional[list[Item]]: ...

    async def read_pagination_flags(self) -> Optional[tuple[Optional[bool], bool]]: ...


class FallbackItemSource:
    """
    ItemSource over two interchangeable readers.

    The primary reader is used until the first time it yields no data; from
    then on the secondary reader is used for the rest of the run. The switch
    is not re-evaluated on every call.
    """

    def __init__(
        self,
        page: HostPage,
        mode: PageMode,
        primary: ItemReader,
        secondary: ItemReader,
        *,
        reporter: Optional[Reporter] = None,
    ):
        self.page = page
        self.mode = mode
        self.primary = primary
        self.secondary = secondary
        self.reporter = reporter or NullReporter()
        self._use_primary = True

    @property
    def using_primary(self) -> bool:
        """False once the source has fallen back."""
        return self._use_primary

    def fall_back(self) -> None:
        """Latch onto the secondary reader."""
        if self._use_primary:
            self._use_primary = False
            self.reporter.verbose("Component state unavailable, reading items from markup")

    @property
    def active(self) -> ItemReader:
        return self.primary if self._use_primary else self.secondary

    async def list_current_items(self) -> list[Item]:
        """Items of the currently rendered page."""
        if self._use_primary:
            items = await self.primary.read_items()
            if items is not None:
                return items
            self.fall_back()
        return await self.secondary.read_items() or []

    async def get_pagination_state(self) -> PaginationState:
        """Pagination flags plus the "show more" action, if present."""
        button = await find_button(self.page, "show more")
        is_last_page = button is None
        is_loading = False

        flags = await self.active.read_pagination_flags()
        if flags is not None:
            state_last, is_loading = flags
            if state_last is not None:
                is_last_page = state_last

        return PaginationState(
            is_last_page=is_last_page,
            is_loading=is_loading,
            load_more=button.click if button is not None else None,
        )

    async def count_items(self) -> int:
        """Number of rendered item controls."""
        return len(await self.page.query_all(control_selector(self.mode)))

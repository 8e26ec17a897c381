# AKCM Adapter Interfaces
# Protocols for the data-source, actuation and host-page collaborators

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from akcm.reconcile.item import Item
    from akcm.reconcile.outcome import AttemptOutcome


class ActuationStyle(str, Enum):
    """How an actuator confirms that an action took effect."""

    # Perform the action, then poll an observable indicator
    FIRE_AND_VERIFY = "fire_and_verify"
    # No indicator exists; a non-error response counts as success
    FIRE_AND_TRUST = "fire_and_trust"


class PageMode(str, Enum):
    """Dashboard layout currently rendered."""

    # A child is selected: every card has an inline switch
    CHILD_SELECTED = "child-selected"
    # No child selected: cards expose a "manage access" button instead
    NO_CHILD_SELECTED = "no-child-selected"


@dataclass
class PaginationState:
    """Pagination flags read from the host page for one cycle."""

    is_last_page: bool
    is_loading: bool = False
    load_more: Optional[Callable[[], Awaitable[None]]] = None


@runtime_checkable
class ItemSource(Protocol):
    """Yields the items of the currently rendered page and its pagination state."""

    async def list_current_items(self) -> list[Item]: ...

    async def get_pagination_state(self) -> PaginationState: ...

    async def count_items(self) -> int: ...


@runtime_checkable
class Actuator(Protocol):
    """Performs the state-changing action for one item."""

    style: ActuationStyle
    max_concurrency: Optional[int]

    async def actuate(self, item: Item, desired: bool) -> AttemptOutcome: ...


class HostElement(Protocol):
    """A rendered element on the host page."""

    async def click(self) -> None: ...

    async def get_attribute(self, name: str) -> Optional[str]: ...

    async def is_checked(self) -> bool: ...

    async def text_content(self) -> str: ...

    async def closest(self, selector: str) -> Optional[HostElement]: ...

    async def query(self, selector: str) -> Optional[HostElement]: ...

    async def query_all(self, selector: str) -> list[HostElement]: ...

    async def scroll_into_view(self) -> None: ...


class HostPage(Protocol):
    """The browser tab showing the dashboard."""

    @property
    def url(self) -> str: ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any: ...

    async def query(self, selector: str) -> Optional[HostElement]: ...

    async def query_all(self, selector: str) -> list[HostElement]: ...

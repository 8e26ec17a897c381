# AKCM Component-State Reader
# Reads item attributes from the dashboard's internal component state

from dataclasses import dataclass, field
from typing import Any, Optional

from akcm.adapters.base import HostPage, PageMode
from akcm.adapters.page import control_selector, find_card
from akcm.config.schema import Category
from akcm.reconcile.item import Item

AVAILABLE = "AVAILABLE"

# Walks up the React fiber tree from a rendered card until it reaches the
# page component that owns the item list, and returns a plain snapshot.
STATE_SNAPSHOT_JS = """
() => {
  const probe = document.querySelector('.content-card-clickable') ||
                document.querySelector('input[role="switch"]') ||
                document.querySelector('[class*="content-card"]') ||
                document.querySelector('.allowlist-count');
  if (!probe) return null;
  const fiberKey = Object.keys(probe).find((k) => k.startsWith('__reactFiber$'));
  if (!fiberKey) return null;
  let fiber = probe[fiberKey];
  for (let i = 0; i < 60 && fiber; i++) {
    const p = fiber.memoizedProps;
    if (p && typeof p.fetchItems === 'function' && p.itemProps && p.basePageData) {
      const items = p.itemProps.items;
      if (!items) return null;
      const child = p.basePageData.selectedChild || null;
      return {
        childId: child ? (child.directedId ?? null) : null,
        childName: child ? (child.firstName ?? null) : null,
        isLastPage: p.itemProps.isLastPage ?? null,
        isLoading: p.itemProps.isLoading ?? false,
        items: items.map((item) => ({
          itemId: item.itemId ?? null,
          title: item.title ?? '',
          category: item.activityCategory ?? null,
          access: item.childDirectedIdAccessMap || {},
        })),
      };
    }
    fiber = fiber.return;
  }
  return null;
}
"""


@dataclass
class StateSnapshot:
    """Plain copy of the page component's props."""

    items: list[dict[str, Any]] = field(default_factory=list)
    child_id: Optional[str] = None
    child_name: Optional[str] = None
    is_last_page: Optional[bool] = None
    is_loading: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StateSnapshot":
        """Create from the object returned by the page script."""
        return cls(
            items=list(data.get("items") or []),
            child_id=data.get("childId"),
            child_name=data.get("childName"),
            is_last_page=data.get("isLastPage"),
            is_loading=bool(data.get("isLoading", False)),
        )


class StateItemSource:
    """
    Structured-state strategy for reading dashboard items.

    Returns None whenever the component state cannot be located, which tells
    the caller to fall back to markup scraping.
    """

    def __init__(self, page: HostPage, mode: PageMode):
        """
        Initialize reader.

        Args:
            page: Host page.
            mode: Rendered dashboard layout.
        """
        self.page = page
        self.mode = mode
        self.child_id: Optional[str] = None
        self.child_name: Optional[str] = None

    async def snapshot(self) -> Optional[StateSnapshot]:
        """Read the page component state, None if unavailable."""
        data = await self.page.evaluate(STATE_SNAPSHOT_JS)
        if not data:
            return None
        return StateSnapshot.from_dict(data)

    async def init(self) -> bool:
        """
        Probe the page and remember the selected child.

        Returns:
            True if component state is reachable.
        """
        snap = await self.snapshot()
        if snap is None:
            return False
        self.child_id = snap.child_id
        self.child_name = snap.child_name
        return True

    async def read_items(self) -> Optional[list[Item]]:
        """
        Read the current page's items.

        Items are paired with the rendered controls by position.

        Returns:
            List of items, or None when state is unavailable.
        """
        snap = await self.snapshot()
        if snap is None:
            return None

        # In no-child-selected view the props carry no selected child, so the
        # id captured at init time decides the access state
        child_id = snap.child_id if self.mode == PageMode.CHILD_SELECTED else self.child_id
        if not child_id:
            # Access state is per child; without an id it cannot be read
            return None
        controls = await self.page.query_all(control_selector(self.mode))
        handle_name = "switch" if self.mode == PageMode.CHILD_SELECTED else "access_button"

        items: list[Item] = []
        for idx, raw in enumerate(snap.items):
            control = controls[idx] if idx < len(controls) else None
            card = await find_card(control) if control is not None else None
            access = raw.get("access") or {}
            enabled = access.get(child_id) == AVAILABLE
            items.append(
                Item(
                    title=raw.get("title") or "",
                    category=Category.parse(raw.get("category")),
                    current_state=enabled,
                    item_id=raw.get("itemId"),
                    handles={handle_name: control, "card": card},
                )
            )
        return items

    async def read_pagination_flags(self) -> Optional[tuple[Optional[bool], bool]]:
        """
        Read pagination flags from component state.

        Returns:
            Tuple of (is_last_page or None if unknown, is_loading), or None.
        """
        snap = await self.snapshot()
        if snap is None:
            return None
        return snap.is_last_page, snap.is_loading

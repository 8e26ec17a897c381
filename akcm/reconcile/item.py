# AKCM Item
# A toggleable dashboard entry as read from one page render

from dataclasses import dataclass, field
from typing import Any, Optional

from akcm.config.schema import Category


@dataclass
class Item:
    """
    A remote toggleable entity.

    Items are rebuilt on every page read. The engine keeps nothing across
    pagination steps except the dedup key; ``handles`` carries whatever the
    producing adapter needs to actuate or verify the item and is opaque to
    everything else.
    """

    title: str
    category: Category = Category.UNKNOWN
    current_state: bool = False
    item_id: Optional[str] = None
    handles: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def dedup_key(self) -> str:
        """
        Key used to guarantee at-most-once processing per run.

        Falls back to the title when no stable id is available. Titles are not
        unique, so colliding titles share one key.
        """
        return self.item_id or self.title

    def handle(self, name: str) -> Any:
        """Get an adapter handle by name, None if absent."""
        return self.handles.get(name)

    @property
    def label(self) -> str:
        """Display form used in log lines."""
        return f'"{self.title}" ({self.category.value})'

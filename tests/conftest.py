# AKCM Test Fixtures
# Pytest fixtures and in-memory fakes for the host page, item sources and actuators

import asyncio
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any, Optional, Union

import pytest

from akcm.adapters.base import ActuationStyle, PaginationState
from akcm.adapters.page import CARD_SELECTOR, SWITCH_SELECTOR
from akcm.config.schema import Category, Policy, TimingConfig
from akcm.reconcile.controller import RunController
from akcm.reconcile.item import Item
from akcm.reconcile.outcome import AttemptOutcome

DASHBOARD_URL = "https://parents.amazon.com/explore"

Script = list[Union[AttemptOutcome, Exception]]


class FakeElement:
    """In-memory HostElement."""

    def __init__(
        self,
        *,
        text: str = "",
        attrs: Optional[dict[str, str]] = None,
        checked: bool = False,
        on_click: Optional[Callable[["FakeElement"], None]] = None,
        parents: Optional[dict[str, "FakeElement"]] = None,
        children: Optional[dict[str, list["FakeElement"]]] = None,
    ):
        self.text = text
        self.attrs = attrs or {}
        self.checked = checked
        self.on_click = on_click
        self.parents = parents or {}
        self.children = children or {}
        self.clicks = 0
        self.scrolled = 0

    async def click(self) -> None:
        self.clicks += 1
        if self.on_click is not None:
            self.on_click(self)

    async def get_attribute(self, name: str) -> Optional[str]:
        return self.attrs.get(name)

    async def is_checked(self) -> bool:
        return self.checked

    async def text_content(self) -> str:
        return self.text

    async def closest(self, selector: str) -> Optional["FakeElement"]:
        return self.parents.get(selector)

    async def query(self, selector: str) -> Optional["FakeElement"]:
        found = self.children.get(selector) or []
        return found[0] if found else None

    async def query_all(self, selector: str) -> list["FakeElement"]:
        return list(self.children.get(selector, []))

    async def scroll_into_view(self) -> None:
        self.scrolled += 1


class FakePage:
    """In-memory HostPage; elements are looked up by exact selector."""

    def __init__(self, url: str = DASHBOARD_URL, state: Any = None):
        self.url = url
        self.state = state
        self.elements: dict[str, list[FakeElement]] = {}
        self.evaluations = 0

    def add(self, selector: str, *elements: FakeElement) -> None:
        self.elements.setdefault(selector, []).extend(elements)

    def remove(self, selector: str) -> None:
        self.elements.pop(selector, None)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.evaluations += 1
        return self.state() if callable(self.state) else self.state

    async def query(self, selector: str) -> Optional[FakeElement]:
        found = self.elements.get(selector) or []
        return found[0] if found else None

    async def query_all(self, selector: str) -> list[FakeElement]:
        return list(self.elements.get(selector, []))


class FakeItemSource:
    """
    ItemSource over a fixed list of pages.

    Pages accumulate like the real dashboard: after loading page N the
    current items are pages 0..N.
    """

    def __init__(self, pages: list[list[Item]]):
        self.pages = pages
        self.loaded = 0
        self.list_calls = 0
        self.load_calls = 0
        self.loading_reads = 0

    @property
    def current(self) -> list[Item]:
        return [item for page in self.pages[: self.loaded + 1] for item in page]

    async def list_current_items(self) -> list[Item]:
        self.list_calls += 1
        return list(self.current)

    async def get_pagination_state(self) -> PaginationState:
        if self.loading_reads > 0:
            self.loading_reads -= 1
            return PaginationState(is_last_page=False, is_loading=True)
        is_last = self.loaded >= len(self.pages) - 1
        return PaginationState(is_last_page=is_last, load_more=None if is_last else self._load_more)

    async def count_items(self) -> int:
        return len(self.current)

    async def _load_more(self) -> None:
        self.load_calls += 1
        self.loaded += 1


class FakeActuator:
    """
    Scriptable actuator.

    ``script`` maps a dedup key to the outcomes (or exceptions) returned on
    successive calls; unscripted calls succeed.
    """

    def __init__(
        self,
        style: ActuationStyle = ActuationStyle.FIRE_AND_VERIFY,
        max_concurrency: Optional[int] = None,
    ):
        self.style = style
        self.max_concurrency = max_concurrency
        self.script: dict[str, Script] = {}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.on_actuate: Optional[Callable[[Item], None]] = None

    async def actuate(self, item: Item, desired: bool) -> AttemptOutcome:
        self.calls.append(item.dedup_key)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.on_actuate is not None:
                self.on_actuate(item)
            await asyncio.sleep(0)
            steps = self.script.get(item.dedup_key)
            result = steps.pop(0) if steps else AttemptOutcome.success()
            if isinstance(result, Exception):
                raise result
            if result.is_success:
                item.current_state = desired
            return result
        finally:
            self.in_flight -= 1


class FakeDashboard:
    """
    Child-selected dashboard with one page of app cards.

    Clicking a card flips its switch, and the component state reports each
    item as available while its switch is on.
    """

    def __init__(self, titles: list[str], *, enabled: bool = True, child_id: Optional[str] = "child-1"):
        self.titles = titles
        self.child_id = child_id
        self.page = FakePage(state=self.snapshot)
        self.switches: list[FakeElement] = []
        self.cards: list[FakeElement] = []
        for title in titles:
            switch = FakeElement(attrs={"aria-label": f"{title}, APP"}, checked=enabled)
            card = FakeElement(on_click=lambda _el, sw=switch: setattr(sw, "checked", not sw.checked))
            switch.parents[CARD_SELECTOR] = card
            self.switches.append(switch)
            self.cards.append(card)
        self.page.add(SWITCH_SELECTOR, *self.switches)

    def snapshot(self) -> dict[str, Any]:
        return {
            "childId": self.child_id,
            "childName": "Ava",
            "isLastPage": True,
            "isLoading": False,
            "items": [
                {
                    "itemId": f"id-{idx}",
                    "title": title,
                    "category": "APP",
                    "access": {self.child_id or "": "AVAILABLE" if switch.checked else "BLOCKED"},
                }
                for idx, (title, switch) in enumerate(zip(self.titles, self.switches))
            ],
        }


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


class RecordingReporter:
    """Reporter that keeps every message."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []
        self.pages: list[tuple[int, int]] = []
        self.results: list[Any] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def verbose(self, message: str) -> None:
        self.messages.append(("verbose", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def page_processed(self, page: int, items_seen: int, stats: Any) -> None:
        self.pages.append((page, items_seen))

    def run_finished(self, result: Any) -> None:
        self.results.append(result)

    def text(self, level: Optional[str] = None) -> str:
        return "\n".join(m for lvl, m in self.messages if level is None or lvl == level)


def make_item(
    title: str,
    category: Union[Category, str] = Category.APP,
    enabled: bool = True,
    item_id: Optional[str] = None,
) -> Item:
    """Build an item enabled by default, so a disable policy selects it."""
    return Item(
        title=title,
        category=Category.parse(category) if isinstance(category, str) else category,
        current_state=enabled,
        item_id=item_id,
    )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("AKCM_CONFIG", raising=False)
    return home


@pytest.fixture
def item_factory() -> Callable[..., Item]:
    """Factory for test items."""
    return make_item


@pytest.fixture
def policy() -> Policy:
    """Disable everything, no delays between batches or pages."""
    return Policy(mode="disable", batch_delay_ms=0, page_delay_ms=0, backoff_base_ms=100)


@pytest.fixture
def fast_timing() -> TimingConfig:
    """Millisecond timeouts so waits finish quickly."""
    return TimingConfig(
        verify_timeout_ms=20,
        verify_poll_ms=1,
        new_items_timeout_ms=20,
        new_items_poll_ms=1,
        loading_poll_ms=1,
        page_load_timeout_ms=20,
        panel_timeout_ms=20,
    )


@pytest.fixture
def controller() -> RunController:
    """A started run controller."""
    ctrl = RunController()
    ctrl.start()
    return ctrl


@pytest.fixture
def actuator() -> FakeActuator:
    """Fire-and-verify fake actuator."""
    return FakeActuator()


@pytest.fixture
def trusting_actuator() -> FakeActuator:
    """Fire-and-trust fake actuator."""
    return FakeActuator(style=ActuationStyle.FIRE_AND_TRUST)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    """Sleep that records delays instead of waiting."""
    return RecordingSleep()


@pytest.fixture
def reporter() -> RecordingReporter:
    """Reporter that records messages."""
    return RecordingReporter()


@pytest.fixture
def fake_page() -> FakePage:
    """Empty page on the dashboard URL."""
    return FakePage()


@pytest.fixture
def source_factory() -> Callable[[list[list[Item]]], FakeItemSource]:
    """Factory for paged item sources."""
    return FakeItemSource


@pytest.fixture
def element_factory() -> Callable[..., FakeElement]:
    """Factory for fake host elements."""
    return FakeElement


@pytest.fixture
def actuator_factory() -> Callable[..., FakeActuator]:
    """Factory for fake actuators with a custom style or concurrency limit."""
    return FakeActuator


@pytest.fixture
def dashboard_factory() -> Callable[..., FakeDashboard]:
    """Factory for single-page child-selected dashboards."""
    return FakeDashboard

# AKCM Reconciliation Session
# Pre-flight, adapter wiring and one-run-at-a-time orchestration

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from akcm.adapters.base import Actuator, HostPage, ItemSource, PageMode
from akcm.adapters.direct_call import DirectCallActuator
from akcm.adapters.fallback import FallbackItemSource
from akcm.adapters.markup_source import MarkupItemSource
from akcm.adapters.page import detect_page_mode, url_matches
from akcm.adapters.probe import probe_actuator
from akcm.adapters.state_source import StateItemSource
from akcm.config.schema import AkcmConfig, DesiredState, Policy
from akcm.reconcile.controller import RunController
from akcm.reconcile.engine import ReconciliationEngine, SleepFunc
from akcm.reconcile.errors import PreflightError, RunStateError
from akcm.reconcile.pagination import PaginationDriver
from akcm.reconcile.reporting import NullReporter, Reporter
from akcm.reconcile.retry import RetryStrategy
from akcm.reconcile.stats import Stats
from akcm.utils.timing import Stopwatch


@dataclass
class RunResult:
    """Result of one reconciliation run."""

    stats: Stats
    pages: int
    stopped: bool
    duration: float
    policy: Policy
    page_mode: Optional[PageMode] = None
    actuator: str = ""

    @property
    def success(self) -> bool:
        """True if the run finished without failed items."""
        return self.stats.failed == 0


class ReconciliationSession:
    """
    Long-lived handle on one dashboard tab.

    Every ``run()`` gets a fresh controller, dedup set and statistics. The
    actuator is probed on the first run and reused by later runs until the
    dashboard switches to a different page mode.
    """

    def __init__(
        self,
        page: HostPage,
        config: Optional[AkcmConfig] = None,
        *,
        reporter: Optional[Reporter] = None,
        source: Optional[ItemSource] = None,
        actuator: Optional[Actuator] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        """
        Initialize session.

        Args:
            page: Host page showing the dashboard.
            config: Configuration. Defaults are used if None.
            reporter: Progress sink.
            source: Item source to use instead of reading the page.
            actuator: Actuator to use instead of probing.
            sleep: Async sleep passed to the engine and pagination driver.
        """
        self.page = page
        self.config = config or AkcmConfig()
        self.reporter = reporter or NullReporter()
        self._source = source
        self._injected_actuator = actuator
        self._actuator = actuator
        self._actuator_mode: Optional[PageMode] = None
        self._sleep = sleep
        self._controller: Optional[RunController] = None
        self._busy = False
        self.last_result: Optional[RunResult] = None

    @property
    def actuator(self) -> Optional[Actuator]:
        """Actuator of the current or most recent run, None before the first run."""
        return self._actuator

    @property
    def controller(self) -> Optional[RunController]:
        """Controller of the current or most recent run."""
        return self._controller

    @property
    def is_active(self) -> bool:
        """True while run() is in progress."""
        return self._busy

    def pause(self) -> bool:
        """Pause the active run at its next suspension point."""
        if self._controller is None:
            return False
        if self._controller.pause():
            self.reporter.info("Paused")
            return True
        return False

    def resume(self) -> bool:
        """Resume a paused run."""
        if self._controller is None:
            return False
        if self._controller.resume():
            self.reporter.info("Resumed")
            return True
        return False

    def stop(self) -> bool:
        """
        Stop the active run once in-flight work completes.

        A stop issued while the run is still setting up ends it before the
        first page is processed.
        """
        if self._controller is None or self._controller.is_done:
            return False
        self.reporter.info("Stopping after the current batch...")
        return self._controller.stop()

    def preflight(self) -> None:
        """
        Check that the page is the parent dashboard.

        Raises:
            PreflightError: If the URL matches none of the host patterns.
        """
        if not url_matches(self.page.url, self.config.host.url_patterns):
            raise PreflightError(
                f"Not on the parent dashboard ({self.page.url}). "
                f"Open {self.config.host.start_url} and navigate to the content list first."
            )

    async def run(self, policy: Optional[Policy] = None) -> RunResult:
        """
        Reconcile every item on the dashboard toward the policy.

        Args:
            policy: Policy for this run. ``config.policy`` if None.

        Returns:
            RunResult.

        Raises:
            RunStateError: If a run is already active.
            PreflightError: If the page is not the dashboard or has no items.
        """
        if self._busy:
            raise RunStateError("A run is already in progress")

        self._busy = True
        controller = RunController()
        self._controller = controller
        try:
            return await self._run(policy or self.config.policy, controller)
        finally:
            controller.stop()
            self._busy = False

    async def _run(self, policy: Policy, controller: RunController) -> RunResult:
        self.preflight()

        page_mode = await detect_page_mode(self.page)
        if page_mode is None and self._source is None:
            raise PreflightError("No content items found. Make sure the content list is loaded.")
        if page_mode is not None:
            self.reporter.info(f"Page mode: {page_mode.value}")

        if page_mode == PageMode.CHILD_SELECTED and policy.mode == DesiredState.ENABLE:
            self.reporter.warning("Enable mode in child-selected view only sees enabled items.")
            self.reporter.warning("To re-enable disabled items, deselect the child first.")

        if self._source is not None:
            source, child_name = self._source, self.config.host.child_name
        else:
            source, child_name = await self._build_source(page_mode)
        actuator = await self._get_actuator(page_mode, child_name)

        engine = ReconciliationEngine(
            policy,
            actuator,
            controller,
            reporter=self.reporter,
            retry=RetryStrategy.for_actuator(actuator, policy, self.config.timing.max_backoff_ms),
            sleep=self._sleep,
        )
        driver = PaginationDriver(
            source,
            engine,
            controller,
            policy=policy,
            timing=self.config.timing,
            reporter=self.reporter,
            sleep=self._sleep,
        )

        self._announce(policy)
        clock = Stopwatch()
        controller.start()
        pages = await driver.run()
        stopped = controller.is_done
        controller.stop()

        result = RunResult(
            stats=engine.stats,
            pages=pages,
            stopped=stopped,
            duration=clock.elapsed,
            policy=policy,
            page_mode=page_mode,
            actuator=type(actuator).__name__,
        )
        self.last_result = result
        self.reporter.run_finished(result)
        return result

    async def aclose(self) -> None:
        """Release resources held by a probed actuator."""
        if self._actuator is not self._injected_actuator and isinstance(self._actuator, DirectCallActuator):
            await self._actuator.aclose()

    async def _build_source(self, page_mode: PageMode) -> tuple[ItemSource, Optional[str]]:
        state = StateItemSource(self.page, page_mode)
        if await state.init():
            self.reporter.verbose("Reading items from component state")
        else:
            self.reporter.verbose("Component state not found, reading items from markup")

        if page_mode == PageMode.NO_CHILD_SELECTED:
            target = self.config.host.child_name or state.child_name
            self.reporter.info(f"Target child: {target or '(first child)'}")

        source = FallbackItemSource(
            self.page,
            page_mode,
            state,
            MarkupItemSource(self.page, page_mode),
            reporter=self.reporter,
        )
        return source, state.child_name

    async def _get_actuator(self, page_mode: Optional[PageMode], child_name: Optional[str]) -> Actuator:
        """Pick an actuator, reusing the previous one while the page mode is unchanged."""
        if self._actuator is not None:
            if self._actuator is self._injected_actuator or self._actuator_mode == page_mode:
                return self._actuator
            self.reporter.verbose("Page mode changed, choosing actuator again")
            await self.aclose()

        self._actuator = probe_actuator(self.page, page_mode, self.config, child_name=child_name)
        self._actuator_mode = page_mode
        self.reporter.verbose(f"Using {type(self._actuator).__name__}")
        return self._actuator

    def _announce(self, policy: Policy) -> None:
        verb = policy.mode.value.capitalize()
        types = ", ".join(t.value for t in policy.content_types) if policy.content_types else "all types"
        self.reporter.info(f"{verb} mode | {types} | concurrency {policy.concurrency}")
        if policy.keywords:
            self.reporter.info(f"Keywords: {', '.join(policy.keywords)}")
        if policy.exclude_keywords:
            self.reporter.info(f"Excluding: {', '.join(policy.exclude_keywords)}")
        if policy.dry_run:
            self.reporter.warning("DRY RUN - no changes will be made")

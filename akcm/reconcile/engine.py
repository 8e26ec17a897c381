# AKCM Reconciliation Engine
# Deduplicates, batches, actuates, verifies and counts one page at a time

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from akcm.adapters.base import Actuator
from akcm.config.schema import Policy
from akcm.reconcile.controller import RunController
from akcm.reconcile.item import Item
from akcm.reconcile.outcome import OutcomeKind, outcome_from_exception
from akcm.reconcile.policy import FilterVerdict, evaluate, in_scope
from akcm.reconcile.reporting import NullReporter, Reporter
from akcm.reconcile.retry import RetryStrategy
from akcm.reconcile.stats import Stats
from akcm.utils.timing import ms

SleepFunc = Callable[[float], Awaitable[None]]


class ItemStatus(str, Enum):
    """Final outcome of reconciling one item."""

    TOGGLED = "toggled"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ItemResult:
    """Final outcome of one item plus how many retries it took."""

    item: Item
    status: ItemStatus
    retries: int = 0
    reason: str = ""


class ReconciliationEngine:
    """
    Drives the items of each page toward the policy's desired state.

    One engine instance belongs to one run: its dedup set and statistics
    start empty and are only ever appended to. All mutation happens on the
    event loop thread, so no locking is needed.
    """

    def __init__(
        self,
        policy: Policy,
        actuator: Actuator,
        controller: RunController,
        *,
        reporter: Optional[Reporter] = None,
        retry: Optional[RetryStrategy] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        """
        Initialize engine.

        Args:
            policy: Selection and pacing policy.
            actuator: Actuation adapter, probed once for the run.
            controller: Run controller providing the pause gate.
            reporter: Progress sink. Defaults to a NullReporter.
            retry: Retry strategy. Derived from the actuator style if not given.
            sleep: Async sleep used for batch delays and backoff.
        """
        self.policy = policy
        self.actuator = actuator
        self.controller = controller
        self.reporter = reporter or NullReporter()
        self.retry = retry or RetryStrategy.for_actuator(actuator, policy)
        self._sleep = sleep or asyncio.sleep
        self._processed: set[str] = set()
        self._satisfied: set[str] = set()
        self._stats = Stats()

    @property
    def stats(self) -> Stats:
        """Snapshot of cumulative statistics for the run."""
        return self._stats.copy()

    @property
    def batch_size(self) -> int:
        """Items actuated concurrently, bounded by what the actuator allows."""
        size = max(1, self.policy.concurrency)
        if self.actuator.max_concurrency:
            size = min(size, self.actuator.max_concurrency)
        return size

    def select(self, items: Iterable[Item]) -> tuple[list[Item], Stats]:
        """
        Pick the items of a page that still need work.

        Survivors are recorded in the dedup set before anything is actuated,
        so an item is never actuated twice even if actuation raises. Items
        that are already in the desired state but otherwise match the policy
        are counted as skipped once per run. If such an item is later found
        out of the desired state again it is still actuated, and ``reverted``
        records that it now appears in two counters.

        Args:
            items: Items read from the current page.

        Returns:
            Tuple of (items to actuate, skipped and reverted counts).
        """
        survivors: list[Item] = []
        counts = Stats()

        for item in items:
            key = item.dedup_key
            if key in self._processed:
                continue

            verdict = evaluate(item, self.policy)
            if verdict == FilterVerdict.SELECTED:
                self._processed.add(key)
                survivors.append(item)
                if key in self._satisfied:
                    counts.reverted += 1
                    self.reporter.verbose(f"{item.label} changed back during the run")
            elif verdict == FilterVerdict.ALREADY_SATISFIED:
                if key not in self._satisfied and in_scope(item, self.policy):
                    self._satisfied.add(key)
                    counts.skipped += 1
                    self.reporter.verbose(f"{item.label} already {self.policy.mode.past_tense}")
            else:
                self.reporter.verbose(f"Filtered out {item.label}: {verdict.value.replace('_', ' ')}")

        return survivors, counts

    async def process_page(self, items: Iterable[Item]) -> Stats:
        """
        Reconcile the items of one page.

        Args:
            items: Items read from the current page.

        Returns:
            Stats delta for this page.
        """
        survivors, delta = self.select(items)
        self._stats.add(delta)

        if not survivors:
            return delta

        if self.policy.dry_run:
            for item in survivors:
                self.reporter.verbose(f"[DRY RUN] Would {self.policy.mode.value}: {item.label}")
            delta.skipped += len(survivors)
            self._stats.add(Stats(skipped=len(survivors)))
            return delta

        size = self.batch_size
        for start in range(0, len(survivors), size):
            if self.controller.is_done:
                break
            await self.controller.check_suspension()
            if self.controller.is_done:
                break

            batch = survivors[start : start + size]
            results = await asyncio.gather(*(self._reconcile_item(item) for item in batch))

            batch_delta = Stats()
            for result in results:
                self._count(result, batch_delta)
            delta.add(batch_delta)
            self._stats.add(batch_delta)

            if start + size < len(survivors):
                await self._sleep(ms(self.policy.batch_delay_ms))

        return delta

    async def _reconcile_item(self, item: Item) -> ItemResult:
        """Actuate one item until it succeeds, fails permanently or runs out of retries."""
        desired = self.policy.desired_state
        retries = 0

        while True:
            try:
                outcome = await self.actuator.actuate(item, desired)
            except Exception as e:
                outcome = outcome_from_exception(e)

            if outcome.kind == OutcomeKind.SUCCESS:
                self.reporter.verbose(f"{self.policy.mode.past_tense.capitalize()}: {item.label}")
                return ItemResult(item, ItemStatus.TOGGLED, retries)

            if outcome.kind == OutcomeKind.ALREADY_SATISFIED:
                if retries > 0:
                    # An earlier attempt landed after its verification window closed
                    self.reporter.verbose(f"{item.label} toggled late, counted as toggled")
                    return ItemResult(item, ItemStatus.TOGGLED, retries)
                self.reporter.verbose(f"{item.label} already {self.policy.mode.past_tense}")
                return ItemResult(item, ItemStatus.SKIPPED, retries, outcome.reason)

            if outcome.kind == OutcomeKind.PERMANENT:
                self.reporter.verbose(f"Failed {item.label}: {outcome.reason}")
                return ItemResult(item, ItemStatus.FAILED, retries, outcome.reason)

            if not self.retry.should_retry(retries):
                self.reporter.verbose(f"Failed {item.label} after {retries} retries: {outcome.reason}")
                return ItemResult(item, ItemStatus.FAILED, retries, outcome.reason)

            delay = self.retry.delay_for(retries, outcome.retry_after)
            retries += 1
            self.reporter.verbose(f"Retry {retries}/{self.retry.max_retries} for {item.label}: {outcome.reason}")
            if delay > 0:
                await self._sleep(delay)

    def _count(self, result: ItemResult, delta: Stats) -> None:
        delta.retried += result.retries
        if result.status == ItemStatus.TOGGLED:
            delta.toggled += 1
        elif result.status == ItemStatus.SKIPPED:
            delta.skipped += 1
        else:
            delta.failed += 1

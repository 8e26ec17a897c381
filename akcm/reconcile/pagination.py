# AKCM Pagination Driver
# Page-by-page main loop with a final straggler pass

from __future__ import annotations

import asyncio
from typing import Optional

from akcm.adapters.base import ItemSource, PaginationState
from akcm.config.schema import Policy, TimingConfig
from akcm.reconcile.controller import RunController
from akcm.reconcile.engine import ReconciliationEngine, SleepFunc
from akcm.reconcile.reporting import NullReporter, Reporter
from akcm.utils.timing import ms, wait_for


class PaginationDriver:
    """
    Walks the dashboard forward one page at a time.

    Each cycle reads the current items, hands them to the engine, then
    advances pagination. Once the last page is reached (or the run is
    stopped) a final pass re-reads the current page to catch items whose
    state changed while earlier pages were being processed.
    """

    def __init__(
        self,
        source: ItemSource,
        engine: ReconciliationEngine,
        controller: RunController,
        *,
        policy: Policy,
        timing: Optional[TimingConfig] = None,
        reporter: Optional[Reporter] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        self.source = source
        self.engine = engine
        self.controller = controller
        self.policy = policy
        self.timing = timing or TimingConfig()
        self.reporter = reporter or NullReporter()
        self._sleep = sleep or asyncio.sleep
        self.pages = 0

    async def run(self) -> int:
        """
        Run the main loop until the last page or a stop.

        Returns:
            Number of page cycles processed (the final pass not included).
        """
        while self.controller.is_active:
            await self.controller.check_suspension()
            if not self.controller.is_active:
                break

            self.pages += 1
            items = await self.source.list_current_items()
            self.reporter.info(f"Page {self.pages}: {len(items)} items loaded")

            await self.engine.process_page(items)
            self.reporter.page_processed(self.pages, len(items), self.engine.stats)

            if not self.controller.is_active:
                break
            if not await self._advance(len(items)):
                break

        if self.controller.is_active:
            await self.controller.check_suspension()
            if self.controller.is_active:
                self.reporter.verbose("Final pass over the current page")
                items = await self.source.list_current_items()
                await self.engine.process_page(items)

        return self.pages

    async def _advance(self, previous_count: int) -> bool:
        """
        Load the next page.

        Returns:
            False when there are no further pages.
        """
        pagination = await self.source.get_pagination_state()

        if pagination.is_loading:
            self.reporter.verbose("Waiting for current page load to finish...")
            pagination = await self._wait_until_loaded(pagination)
            if pagination.is_loading:
                self.reporter.verbose("Page still loading, re-reading current page")
                return True

        if pagination.is_last_page:
            self.reporter.info("Reached last page")
            return False

        if pagination.load_more is None:
            self.reporter.info("No more pages to load")
            return False

        self.reporter.verbose("Loading next page...")
        await pagination.load_more()
        await self.wait_for_new_items(previous_count)
        await self._sleep(ms(self.policy.page_delay_ms))
        return True

    async def _wait_until_loaded(self, pagination: PaginationState) -> PaginationState:
        latest = pagination

        async def loaded() -> bool:
            nonlocal latest
            if not self.controller.is_active:
                return True
            latest = await self.source.get_pagination_state()
            return not latest.is_loading

        await wait_for(
            loaded,
            timeout=ms(self.timing.page_load_timeout_ms),
            interval=ms(self.timing.loading_poll_ms),
            initial_delay=True,
        )
        return latest

    async def wait_for_new_items(self, previous_count: int) -> bool:
        """
        Wait until the page shows more items than before.

        A timeout is not fatal: the host occasionally advances without the
        count growing.

        Args:
            previous_count: Item count before "load more" was triggered.

        Returns:
            True if new items appeared, False on timeout or stop.
        """
        grew = False

        async def more_items() -> bool:
            nonlocal grew
            if not self.controller.is_active:
                return True
            grew = await self.source.count_items() > previous_count
            return grew

        await wait_for(
            more_items,
            timeout=ms(self.timing.new_items_timeout_ms),
            interval=ms(self.timing.new_items_poll_ms),
            initial_delay=True,
        )
        if not grew and self.controller.is_active:
            self.reporter.info("Timeout waiting for new items, continuing")
        return grew

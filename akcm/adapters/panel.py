# AKCM Panel Actuator
# Toggles items in no-child-selected view through the manage-access sheet

import asyncio
from typing import Optional

from akcm.adapters.base import ActuationStyle, HostElement, HostPage
from akcm.adapters.page import PANEL_SWITCH_SELECTOR, SWITCH_SELECTOR, find_button, find_panel_container
from akcm.config.schema import TimingConfig
from akcm.reconcile.errors import DiscoveryError
from akcm.reconcile.item import Item
from akcm.reconcile.outcome import AttemptOutcome
from akcm.utils.timing import ms, wait_for

# Row holding one child's label and switch inside the sheet
CHILD_ROW_SELECTOR = "*:has(> label)"

BUTTON_POLL = 0.1
DONE_TIMEOUT = 2.0
SCROLL_SETTLE = 0.05
DONE_SETTLE = 0.3
CANCEL_SETTLE = 0.2


class PanelActuator:
    """
    Fire-and-verify actuator for the no-child-selected dashboard view.

    Each item is handled by opening its sheet, flipping the target child's
    switch and confirming with "Done". Only one sheet can be open at a time,
    so items are processed one by one.
    """

    style = ActuationStyle.FIRE_AND_VERIFY
    max_concurrency: Optional[int] = 1

    def __init__(
        self,
        page: HostPage,
        *,
        child_name: Optional[str] = None,
        timing: Optional[TimingConfig] = None,
    ):
        """
        Initialize actuator.

        Args:
            page: Host page.
            child_name: Child whose switch is toggled when the sheet lists
                several children. The first switch is used if None.
            timing: Polling intervals and timeouts.
        """
        self.page = page
        self.child_name = child_name
        self.timing = timing or TimingConfig()

    async def actuate(self, item: Item, desired: bool) -> AttemptOutcome:
        """
        Toggle one item through its manage-access sheet.

        Args:
            item: Item carrying an ``access_button`` handle.
            desired: Switch position to reach for the target child.

        Returns:
            AttemptOutcome.

        Raises:
            DiscoveryError: If the item has no access button.
        """
        button: Optional[HostElement] = item.handle("access_button")
        if button is None:
            raise DiscoveryError(f"No access button for {item.label}")

        await button.scroll_into_view()
        await asyncio.sleep(SCROLL_SETTLE)

        if not await self._open_panel(button):
            return AttemptOutcome.transient("panel did not open")

        switch = await self.find_child_switch()
        if switch is None:
            await self._cancel()
            return AttemptOutcome.permanent("no child switch in panel")

        if await switch.is_checked() == desired:
            await self._cancel()
            return AttemptOutcome.already_satisfied()

        target = await switch.closest("label") or switch
        await target.click()
        if not await self._verify(switch, desired):
            # One re-toggle inside the open sheet before giving up
            await target.click()
            if not await self._verify(switch, desired):
                await self._cancel()
                return AttemptOutcome.transient("switch did not toggle")

        if not await self._confirm():
            await self._cancel()
            return AttemptOutcome.transient("could not save changes")
        return AttemptOutcome.success()

    async def find_child_switch(self) -> Optional[HostElement]:
        """
        Pick the target child's switch in the open sheet.

        Returns:
            The only switch, the switch whose row names the target child, the
            first switch, or None if the sheet has no switches.
        """
        container = await find_panel_container(self.page)
        if container is None:
            return None

        switches = await container.query_all(SWITCH_SELECTOR)
        if not switches:
            return None
        if len(switches) == 1:
            return switches[0]

        if self.child_name:
            for switch in switches:
                row = await switch.closest(CHILD_ROW_SELECTOR)
                if row is not None and self.child_name in (await row.text_content() or ""):
                    return switch

        return switches[0]

    async def _open_panel(self, button: HostElement) -> bool:
        await button.click()
        found = await wait_for(
            lambda: self.page.query(PANEL_SWITCH_SELECTOR),
            timeout=ms(self.timing.panel_timeout_ms),
            interval=BUTTON_POLL,
        )
        return found is not None

    async def _verify(self, switch: HostElement, desired: bool) -> bool:
        async def flipped() -> bool:
            return await switch.is_checked() == desired

        return bool(
            await wait_for(
                flipped,
                timeout=ms(self.timing.verify_timeout_ms),
                interval=ms(self.timing.verify_poll_ms),
            )
        )

    async def _confirm(self) -> bool:
        done = await wait_for(
            lambda: find_button(self.page, "Done", exact=True),
            timeout=DONE_TIMEOUT,
            interval=BUTTON_POLL,
        )
        if done is None:
            return False
        await done.click()
        await asyncio.sleep(DONE_SETTLE)
        return True

    async def _cancel(self) -> None:
        cancel = await find_button(self.page, "Cancel", exact=True)
        if cancel is not None:
            await cancel.click()
            await asyncio.sleep(CANCEL_SETTLE)

# AKCM Card-Click Actuator
# Toggles items in child-selected view by clicking their content card

from typing import Optional

from akcm.adapters.base import ActuationStyle, HostElement
from akcm.config.schema import TimingConfig
from akcm.reconcile.errors import DiscoveryError
from akcm.reconcile.item import Item
from akcm.reconcile.outcome import AttemptOutcome
from akcm.utils.timing import ms, wait_for


class CardClickActuator:
    """
    Fire-and-verify actuator for the child-selected dashboard view.

    Clicking the card flips the inline switch; the switch is then polled
    until it shows the desired position or the verification window closes.
    Clicking the switch itself does not work on this dashboard, the click
    has to land on the card.
    """

    style = ActuationStyle.FIRE_AND_VERIFY
    max_concurrency: Optional[int] = None

    def __init__(self, timing: Optional[TimingConfig] = None):
        self.timing = timing or TimingConfig()

    async def actuate(self, item: Item, desired: bool) -> AttemptOutcome:
        """
        Click the item's card and wait for its switch to flip.

        Args:
            item: Item carrying ``card`` and, usually, ``switch`` handles.
            desired: Switch position to reach.

        Returns:
            AttemptOutcome.

        Raises:
            DiscoveryError: If the item has no card to click.
        """
        card: Optional[HostElement] = item.handle("card")
        if card is None:
            raise DiscoveryError(f"No card found for {item.label}")

        switch: Optional[HostElement] = item.handle("switch")
        if switch is not None and await switch.is_checked() == desired:
            return AttemptOutcome.already_satisfied()

        await card.click()

        if switch is None:
            # Nothing to observe
            return AttemptOutcome.success()

        async def flipped() -> bool:
            return await switch.is_checked() == desired

        if await wait_for(
            flipped,
            timeout=ms(self.timing.verify_timeout_ms),
            interval=ms(self.timing.verify_poll_ms),
        ):
            return AttemptOutcome.success()
        return AttemptOutcome.transient("switch did not change state")

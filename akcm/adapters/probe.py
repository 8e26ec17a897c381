# AKCM Actuator Probing
# Picks the actuation adapter the current host surface supports

from typing import Optional

import httpx

from akcm.adapters.base import Actuator, HostPage, PageMode
from akcm.adapters.card_click import CardClickActuator
from akcm.adapters.direct_call import DirectCallActuator
from akcm.adapters.panel import PanelActuator
from akcm.config.schema import AkcmConfig
from akcm.reconcile.errors import PreflightError


def probe_actuator(
    page: HostPage,
    page_mode: Optional[PageMode],
    config: AkcmConfig,
    *,
    child_name: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Actuator:
    """
    Choose an actuator for the run.

    Order of preference:
        1. Child-selected view: click cards and watch the inline switches.
        2. A direct-call endpoint is configured: call it for every item.
        3. No-child-selected view: go through the manage-access sheet.

    Args:
        page: Host page.
        page_mode: Detected dashboard layout.
        config: Full configuration.
        child_name: Auto-detected child to target in the sheet.
            ``host.child_name`` takes precedence when set.
        client: HTTP client for the direct-call actuator.

    Returns:
        Actuator instance.

    Raises:
        PreflightError: If no actuation capability is available.
    """
    if page_mode == PageMode.CHILD_SELECTED:
        return CardClickActuator(config.timing)

    if config.direct_call.endpoint:
        return DirectCallActuator(config.direct_call, client=client)

    if page_mode == PageMode.NO_CHILD_SELECTED:
        return PanelActuator(
            page,
            child_name=config.host.child_name or child_name,
            timing=config.timing,
        )

    raise PreflightError("No actuation method available on this page")

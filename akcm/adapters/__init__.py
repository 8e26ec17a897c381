# AKCM Adapters Module
# Data-source and actuation adapters for the parent dashboard

from akcm.adapters.base import (
    ActuationStyle,
    Actuator,
    HostElement,
    HostPage,
    ItemSource,
    PageMode,
    PaginationState,
)
from akcm.adapters.card_click import CardClickActuator
from akcm.adapters.direct_call import DirectCallActuator
from akcm.adapters.fallback import FallbackItemSource
from akcm.adapters.markup_source import MarkupItemSource
from akcm.adapters.page import detect_page_mode
from akcm.adapters.panel import PanelActuator
from akcm.adapters.probe import probe_actuator
from akcm.adapters.state_source import StateItemSource

# The Playwright binding is imported from akcm.adapters.playwright_page
# directly so the browser extra stays optional.

__all__ = [
    "ActuationStyle",
    "Actuator",
    "CardClickActuator",
    "DirectCallActuator",
    "FallbackItemSource",
    "HostElement",
    "HostPage",
    "ItemSource",
    "MarkupItemSource",
    "PageMode",
    "PaginationState",
    "PanelActuator",
    "StateItemSource",
    "detect_page_mode",
    "probe_actuator",
]

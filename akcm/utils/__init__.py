# AKCM Utilities Module
# Helper functions for polling, timing and platform detection

from akcm.utils.platform import get_current_platform, supports_signal_controls
from akcm.utils.timing import Stopwatch, format_elapsed, ms, wait_for

__all__ = [
    # Platform
    "get_current_platform",
    "supports_signal_controls",
    # Timing
    "wait_for",
    "ms",
    "format_elapsed",
    "Stopwatch",
]

# AKCM Platform Detection Utilities
# Decides which runtime-control mechanisms the host supports

import platform
import signal

# Platform name mapping: system name -> AKCM platform name
_PLATFORM_MAP: dict[str, str] = {
    "Darwin": "macos",
    "Linux": "linux",
    "Windows": "windows",
}


def get_current_platform() -> str:
    """
    Get the current platform identifier.

    Returns:
        Platform string: "macos", "linux", or "windows".
    """
    system = platform.system()
    return _PLATFORM_MAP.get(system, system.lower())


def supports_signal_controls() -> bool:
    """
    Check if pause/resume can be bound to POSIX signals.

    asyncio only installs signal handlers on Unix event loops, and
    SIGUSR1/SIGUSR2 do not exist on Windows.

    Returns:
        True if SIGUSR1, SIGUSR2 and loop signal handlers are available.
    """
    if get_current_platform() == "windows":
        return False
    return hasattr(signal, "SIGUSR1") and hasattr(signal, "SIGUSR2")

# AKCM Errors
# Exception taxonomy for item-level and run-level failures

from typing import Optional


class AkcmError(Exception):
    """Base class for all AKCM errors."""


class DiscoveryError(AkcmError):
    """No actuation handle could be resolved for an item. Never retried."""


class VerificationTimeout(AkcmError):
    """The action was taken but the state change was not observed in time."""


class TransientRemoteError(AkcmError):
    """Network error or similar condition worth retrying with backoff."""

    def __init__(self, message: str, *, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class RateLimitedError(TransientRemoteError):
    """The remote system asked us to slow down."""


class PermanentRemoteError(AkcmError):
    """The remote system explicitly rejected the change. Never retried."""


class PreflightError(AkcmError):
    """The host surface is not the dashboard; the run aborts before starting."""


class RunStateError(AkcmError):
    """A run was requested while another run is active in the same session."""

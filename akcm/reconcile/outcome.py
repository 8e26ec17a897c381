# AKCM Attempt Outcomes
# The single contract between actuation adapters and the engine

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from akcm.reconcile.errors import (
    DiscoveryError,
    PermanentRemoteError,
    RateLimitedError,
    TransientRemoteError,
    VerificationTimeout,
)


class OutcomeKind(str, Enum):
    """Result of a single actuation attempt."""

    SUCCESS = "success"
    ALREADY_SATISFIED = "already_satisfied"
    TRANSIENT = "transient"
    PERMANENT = "permanent"


@dataclass(frozen=True)
class AttemptOutcome:
    """
    Outcome of one actuation attempt.

    Adapters return one of these per call; the engine decides whether to
    retry based on ``kind`` alone, using ``retry_after`` only to lengthen a
    backoff delay.
    """

    kind: OutcomeKind
    reason: str = ""
    rate_limited: bool = False
    retry_after: Optional[float] = None
    discovery: bool = False

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def is_retryable(self) -> bool:
        return self.kind == OutcomeKind.TRANSIENT

    @classmethod
    def success(cls) -> "AttemptOutcome":
        return cls(OutcomeKind.SUCCESS)

    @classmethod
    def already_satisfied(cls, reason: str = "already in desired state") -> "AttemptOutcome":
        return cls(OutcomeKind.ALREADY_SATISFIED, reason)

    @classmethod
    def transient(
        cls,
        reason: str,
        *,
        rate_limited: bool = False,
        retry_after: Optional[float] = None,
    ) -> "AttemptOutcome":
        return cls(OutcomeKind.TRANSIENT, reason, rate_limited=rate_limited, retry_after=retry_after)

    @classmethod
    def permanent(cls, reason: str, *, discovery: bool = False) -> "AttemptOutcome":
        return cls(OutcomeKind.PERMANENT, reason, discovery=discovery)


def outcome_from_exception(exc: Exception) -> AttemptOutcome:
    """
    Convert an exception raised by an adapter into an attempt outcome.

    Args:
        exc: Exception raised during actuation.

    Returns:
        AttemptOutcome. Unclassified exceptions are treated as transient.
    """
    if isinstance(exc, DiscoveryError):
        return AttemptOutcome.permanent(str(exc) or "no actuation handle", discovery=True)
    if isinstance(exc, PermanentRemoteError):
        return AttemptOutcome.permanent(str(exc) or "rejected")
    if isinstance(exc, RateLimitedError):
        return AttemptOutcome.transient(str(exc) or "rate limited", rate_limited=True, retry_after=exc.retry_after)
    if isinstance(exc, TransientRemoteError):
        return AttemptOutcome.transient(str(exc) or "transient error", retry_after=exc.retry_after)
    if isinstance(exc, VerificationTimeout):
        return AttemptOutcome.transient(str(exc) or "state change not observed")
    return AttemptOutcome.transient(f"{type(exc).__name__}: {exc}")

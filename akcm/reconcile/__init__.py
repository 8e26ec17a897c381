# AKCM Reconcile Module
# Core reconciliation engine and components

from akcm.reconcile.controller import RunController, RunState
from akcm.reconcile.engine import ItemResult, ItemStatus, ReconciliationEngine
from akcm.reconcile.errors import (
    AkcmError,
    DiscoveryError,
    PermanentRemoteError,
    PreflightError,
    RateLimitedError,
    RunStateError,
    TransientRemoteError,
    VerificationTimeout,
)
from akcm.reconcile.item import Item
from akcm.reconcile.outcome import AttemptOutcome, OutcomeKind, outcome_from_exception
from akcm.reconcile.pagination import PaginationDriver
from akcm.reconcile.policy import FilterVerdict, evaluate, should_process
from akcm.reconcile.reporting import NullReporter, Reporter
from akcm.reconcile.retry import RetryStrategy
from akcm.reconcile.stats import Stats

# ReconciliationSession lives in akcm.reconcile.session; it depends on the
# concrete adapters and is not imported here.

__all__ = [
    # Item
    "Item",
    "Stats",
    # Policy
    "FilterVerdict",
    "evaluate",
    "should_process",
    # Controller
    "RunController",
    "RunState",
    # Outcomes
    "AttemptOutcome",
    "OutcomeKind",
    "outcome_from_exception",
    "RetryStrategy",
    # Engine
    "ReconciliationEngine",
    "ItemResult",
    "ItemStatus",
    "PaginationDriver",
    # Reporting
    "Reporter",
    "NullReporter",
    # Errors
    "AkcmError",
    "DiscoveryError",
    "VerificationTimeout",
    "TransientRemoteError",
    "RateLimitedError",
    "PermanentRemoteError",
    "PreflightError",
    "RunStateError",
]

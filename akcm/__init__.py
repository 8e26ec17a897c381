"""AKCM - Amazon Kids Content Manager.

Bulk enable or disable content on the Amazon Kids parent dashboard by
reconciling every listed item toward a desired state, page by page.
"""

__version__ = "3.0.0"
__author__ = "Bryan Roscoe"

__all__ = [
    "__version__",
    "AkcmConfig",
    "Policy",
    "Item",
    "Stats",
    "RunController",
    "ReconciliationEngine",
    "ReconciliationSession",
    "RunResult",
    "should_process",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("AkcmConfig", "Policy"):
        from akcm.config import schema

        return getattr(schema, name)
    if name == "Item":
        from akcm.reconcile.item import Item

        return Item
    if name == "Stats":
        from akcm.reconcile.stats import Stats

        return Stats
    if name == "RunController":
        from akcm.reconcile.controller import RunController

        return RunController
    if name == "ReconciliationEngine":
        from akcm.reconcile.engine import ReconciliationEngine

        return ReconciliationEngine
    if name in ("ReconciliationSession", "RunResult"):
        from akcm.reconcile import session

        return getattr(session, name)
    if name == "should_process":
        from akcm.reconcile.policy import should_process

        return should_process
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

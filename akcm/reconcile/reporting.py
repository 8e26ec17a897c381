# AKCM Reporting Interface
# What the engine emits while it runs

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from akcm.reconcile.session import RunResult
    from akcm.reconcile.stats import Stats


class Reporter(Protocol):
    """Sink for run progress. Implementations hold no reconciliation logic."""

    def info(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def page_processed(self, page: int, items_seen: int, stats: Stats) -> None: ...

    def run_finished(self, result: RunResult) -> None: ...


class NullReporter:
    """Reporter that discards everything."""

    def info(self, message: str) -> None:
        pass

    def verbose(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def page_processed(self, page: int, items_seen: int, stats: Stats) -> None:
        pass

    def run_finished(self, result: RunResult) -> None:
        pass

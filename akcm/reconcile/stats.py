# AKCM Run Statistics
# Monotonic outcome counters for a reconciliation run

from dataclasses import asdict, dataclass


@dataclass
class Stats:
    """
    Outcome counters.

    Used both for the cumulative run totals and for per-page deltas.
    Counters only ever grow within a run. They count outcomes, not distinct
    items: an item skipped as already satisfied and later flipped back by the
    host is counted again when it is actuated, and ``reverted`` says how many
    items that happened to.
    """

    toggled: int = 0
    skipped: int = 0
    failed: int = 0
    retried: int = 0
    reverted: int = 0

    def add(self, other: "Stats") -> None:
        """Accumulate another Stats into this one."""
        self.toggled += other.toggled
        self.skipped += other.skipped
        self.failed += other.failed
        self.retried += other.retried
        self.reverted += other.reverted

    def copy(self) -> "Stats":
        """Snapshot copy."""
        return Stats(**asdict(self))

# AKCM Run Controller
# Cooperative running/paused/done state machine with a pause gate

import asyncio
from collections.abc import Callable
from enum import Enum
from typing import Optional


class RunState(str, Enum):
    """Lifecycle of a single reconciliation run."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    DONE = "done"


class RunController:
    """
    Pause/resume/stop control for one run.

    The engine awaits ``check_suspension()`` before each unit of work
    (page, batch, panel item). Work already in flight is never interrupted;
    a pause or stop takes effect at the next suspension point.
    """

    def __init__(self, on_change: Optional[Callable[[RunState], None]] = None):
        """
        Initialize controller.

        Args:
            on_change: Optional callback invoked after every state transition.
        """
        self._state = RunState.IDLE
        self._gate = asyncio.Event()
        self._gate.set()
        self._on_change = on_change

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == RunState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self._state == RunState.PAUSED

    @property
    def is_done(self) -> bool:
        return self._state == RunState.DONE

    @property
    def is_active(self) -> bool:
        """Running or paused."""
        return self._state in (RunState.RUNNING, RunState.PAUSED)

    def start(self) -> bool:
        """Move idle -> running. Returns False if the run already started."""
        if self._state != RunState.IDLE:
            return False
        self._transition(RunState.RUNNING)
        return True

    def pause(self) -> bool:
        """Move running -> paused. No-op otherwise."""
        if self._state != RunState.RUNNING:
            return False
        self._gate.clear()
        self._transition(RunState.PAUSED)
        return True

    def resume(self) -> bool:
        """Move paused -> running and release every waiter. No-op otherwise."""
        if self._state != RunState.PAUSED:
            return False
        self._transition(RunState.RUNNING)
        self._gate.set()
        return True

    def stop(self) -> bool:
        """Move any state -> done, releasing waiters so a paused run can exit."""
        if self._state == RunState.DONE:
            return False
        self._transition(RunState.DONE)
        self._gate.set()
        return True

    async def check_suspension(self) -> None:
        """Block while paused; return immediately when running or done."""
        while self._state == RunState.PAUSED:
            await self._gate.wait()

    def _transition(self, state: RunState) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)

# AKCM Run Controller Tests
# State transitions and the pause gate

import asyncio

import pytest

from akcm.reconcile.controller import RunController, RunState


class TestTransitions:
    """Tests for the run state machine."""

    def test_initial_state(self):
        ctrl = RunController()
        assert ctrl.state == RunState.IDLE
        assert not ctrl.is_active

    def test_start(self):
        ctrl = RunController()
        assert ctrl.start()
        assert ctrl.is_running
        assert not ctrl.start()

    def test_pause_resume(self):
        ctrl = RunController()
        ctrl.start()
        assert ctrl.pause()
        assert ctrl.is_paused
        assert ctrl.is_active
        assert ctrl.resume()
        assert ctrl.is_running

    def test_invalid_transitions_are_noops(self):
        ctrl = RunController()
        assert not ctrl.pause()
        assert not ctrl.resume()
        ctrl.start()
        assert not ctrl.resume()
        ctrl.pause()
        assert not ctrl.pause()
        assert ctrl.is_paused

    def test_stop_from_any_state(self):
        for prepare in (lambda c: None, lambda c: c.start(), lambda c: (c.start(), c.pause())):
            ctrl = RunController()
            prepare(ctrl)
            assert ctrl.stop()
            assert ctrl.is_done
            assert not ctrl.stop()

    def test_no_transitions_after_done(self):
        ctrl = RunController()
        ctrl.start()
        ctrl.stop()
        assert not ctrl.start()
        assert not ctrl.pause()
        assert not ctrl.resume()
        assert ctrl.is_done

    def test_on_change_callback(self):
        seen: list[RunState] = []
        ctrl = RunController(on_change=seen.append)
        ctrl.start()
        ctrl.pause()
        ctrl.pause()
        ctrl.resume()
        ctrl.stop()
        assert seen == [RunState.RUNNING, RunState.PAUSED, RunState.RUNNING, RunState.DONE]


class TestPauseGate:
    """Tests for check_suspension."""

    @pytest.mark.asyncio
    async def test_returns_immediately_when_running(self):
        ctrl = RunController()
        ctrl.start()
        await asyncio.wait_for(ctrl.check_suspension(), timeout=1)

    @pytest.mark.asyncio
    async def test_blocks_until_resume(self):
        ctrl = RunController()
        ctrl.start()
        ctrl.pause()

        waiter = asyncio.create_task(ctrl.check_suspension())
        await asyncio.sleep(0.01)
        assert not waiter.done()

        ctrl.resume()
        await asyncio.wait_for(waiter, timeout=1)

    @pytest.mark.asyncio
    async def test_stop_releases_paused_waiters(self):
        ctrl = RunController()
        ctrl.start()
        ctrl.pause()

        waiters = [asyncio.create_task(ctrl.check_suspension()) for _ in range(3)]
        await asyncio.sleep(0.01)
        ctrl.stop()
        await asyncio.wait_for(asyncio.gather(*waiters), timeout=1)
        assert ctrl.is_done

    @pytest.mark.asyncio
    async def test_pause_again_after_resume(self):
        ctrl = RunController()
        ctrl.start()
        ctrl.pause()
        ctrl.resume()
        ctrl.pause()

        waiter = asyncio.create_task(ctrl.check_suspension())
        await asyncio.sleep(0.01)
        assert not waiter.done()
        ctrl.resume()
        await asyncio.wait_for(waiter, timeout=1)

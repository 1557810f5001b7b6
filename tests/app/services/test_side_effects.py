"""Tests for the side-effect runner."""

from __future__ import annotations

import asyncio

import pytest

from app.services.side_effects import SideEffectRunner


async def _ok() -> str:
    return "sent"


async def _boom() -> None:
    raise ConnectionError("smtp down")


class TestSideEffectRunner:
    """Failures are captured, never raised."""

    @pytest.mark.asyncio
    async def test_run_success(self) -> None:
        result = await SideEffectRunner().run("welcome_email", _ok())
        assert result.ok is True
        assert result.name == "welcome_email"

    @pytest.mark.asyncio
    async def test_run_failure_is_captured(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING"):
            result = await SideEffectRunner().run("welcome_email", _boom())

        assert result.ok is False
        assert result.error_type == "ConnectionError"
        assert any(record.getMessage() == "side_effect_failed" for record in caplog.records)

    @pytest.mark.asyncio
    async def test_schedule_tracks_until_done(self) -> None:
        runner = SideEffectRunner()
        release = asyncio.Event()

        async def _wait() -> None:
            await release.wait()

        task = runner.schedule("reset_email", _wait())
        assert runner.active_count == 1

        release.set()
        result = await task
        await asyncio.sleep(0)

        assert result.ok is True
        assert runner.active_count == 0

    @pytest.mark.asyncio
    async def test_drain_waits_for_pending(self) -> None:
        runner = SideEffectRunner()
        done: list[str] = []

        async def _slow() -> None:
            await asyncio.sleep(0.01)
            done.append("x")

        runner.schedule("slow", _slow())
        await runner.drain(timeout_seconds=1.0)

        assert done == ["x"]

    @pytest.mark.asyncio
    async def test_drain_cancels_leftovers(self) -> None:
        runner = SideEffectRunner()

        async def _forever() -> None:
            await asyncio.Event().wait()

        task = runner.schedule("stuck", _forever())
        await runner.drain(timeout_seconds=0.01)

        assert task.cancelled()

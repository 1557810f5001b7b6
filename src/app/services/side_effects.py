"""Side-effect runner for non-critical work.

Route handlers hand over work that must not affect the response (welcome
emails, reset emails). Failures are captured into a ``SideEffectResult`` and
logged; they never propagate into the request. Scheduled tasks are tracked
so shutdown can wait for them.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SideEffectResult:
    name: str
    ok: bool
    error_type: str | None = None


class SideEffectRunner:
    """Run side effects inline or in the background with a concurrency cap.

    Args:
        max_concurrency: Maximum side effects running at once
    """

    def __init__(self, max_concurrency: int = 100) -> None:
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._active: set[asyncio.Task[SideEffectResult]] = set()

    @property
    def active_count(self) -> int:
        return len(self._active)

    async def run(self, name: str, coroutine: Awaitable[Any]) -> SideEffectResult:
        """Await the side effect and return its result, never raising."""
        async with self._semaphore:
            try:
                await coroutine
            except Exception as exc:
                logger.warning(
                    "side_effect_failed",
                    extra={"side_effect": name, "error_type": type(exc).__name__},
                )
                return SideEffectResult(name=name, ok=False, error_type=type(exc).__name__)
        logger.debug("side_effect_completed", extra={"side_effect": name})
        return SideEffectResult(name=name, ok=True)

    def schedule(self, name: str, coroutine: Awaitable[Any]) -> asyncio.Task[SideEffectResult]:
        """Run the side effect in the background."""
        task = asyncio.create_task(self.run(name, coroutine))
        self._active.add(task)
        task.add_done_callback(self._active.discard)
        return task

    async def drain(self, timeout_seconds: float = 30.0) -> None:
        """Wait for pending side effects during shutdown, cancelling leftovers."""
        if not self._active:
            return

        pending_now = list(self._active)
        logger.info(
            "side_effects_shutdown_wait",
            extra={"pending": len(pending_now), "timeout_seconds": timeout_seconds},
        )
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            return

        for task in pending:
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.gather(*pending, return_exceptions=True)
        logger.warning("side_effects_shutdown_cancelled", extra={"cancelled": len(pending)})

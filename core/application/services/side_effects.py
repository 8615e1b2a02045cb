"""
Best-effort side effects.

Cart clearing, realtime pushes and analytics recomputation must never fail
or delay the operation that triggered them.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Set

logger = logging.getLogger(__name__)


class SideEffectRunner:
    """
    Runs coroutine factories outside the caller's failure domain.

    With ``detached=True`` each effect becomes its own task; references are
    held until completion so tasks are not garbage collected mid-flight.
    ``detached=False`` awaits inline, which keeps tests deterministic.
    """

    def __init__(self, detached: bool = True) -> None:
        self._detached = detached
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def run(self, name: str, effect: Callable[[], Awaitable[None]]) -> None:
        if self._detached:
            task = asyncio.create_task(self._guarded(name, effect), name=f"side-effect:{name}")
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return
        await self._guarded(name, effect)

    async def drain(self) -> None:
        """Wait for in-flight effects (shutdown, tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _guarded(self, name: str, effect: Callable[[], Awaitable[None]]) -> None:
        try:
            await effect()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Side effect '{name}' failed: {e}", exc_info=True)

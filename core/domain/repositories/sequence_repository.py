"""Named monotonic counters."""

from abc import ABC, abstractmethod


class SequenceRepository(ABC):

    @abstractmethod
    async def next_value(self, name: str, seed: int = 0) -> int:
        """Atomically increment and return the counter.

        A counter that does not exist yet starts from ``seed`` so the first
        value handed out is ``seed + 1``.
        """
        pass

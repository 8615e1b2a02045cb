"""Shopping cart interface (only the part the order flow needs)."""

from abc import ABC, abstractmethod


class CartRepository(ABC):

    @abstractmethod
    async def clear(self, user_id: str) -> None:
        """Empty the user's cart. A missing cart is not an error."""
        pass

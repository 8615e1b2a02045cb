"""Repository interface for ReturnRequest aggregate."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.return_request import ReturnRequest
from ..enums import ReturnStatus


class ReturnRepository(ABC):

    @abstractmethod
    async def add(self, request: ReturnRequest) -> None:
        """Insert a return request. Raises Conflict on a duplicate RMA."""
        pass

    @abstractmethod
    async def update(self, request: ReturnRequest) -> None:
        pass

    @abstractmethod
    async def get(self, return_id: str) -> Optional[ReturnRequest]:
        pass

    @abstractmethod
    async def rma_exists(self, rma_number: str) -> bool:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[ReturnRequest]:
        """Newest first."""
        pass

    @abstractmethod
    async def list_all(self, status: Optional[ReturnStatus] = None) -> List[ReturnRequest]:
        """Newest first, optionally filtered by status."""
        pass

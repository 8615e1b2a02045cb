"""Unit of Work pattern for atomic transactions."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .repositories import (
    SqlAlchemyCartRepository,
    SqlAlchemyCatalogRepository,
    SqlAlchemyEventStore,
    SqlAlchemyOrderRepository,
    SqlAlchemyReturnRepository,
    SqlAlchemySequenceRepository,
    SqlAlchemyStoreSettingsRepository,
)


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions.

    Responsibilities:
    1. Manage SQLAlchemy session lifecycle
    2. Atomic commit/rollback of all repository operations
    3. Lazy initialization of repositories
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._repositories: dict = {}

    async def __aenter__(self) -> "UnitOfWork":
        """Start transaction scope."""
        self._session = self._session_factory()
        self._repositories = {}
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Rollback on exception; anything not committed is discarded."""
        if exc_type is not None:
            await self._session.rollback()
        await self._session.close()

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._session

    def _repository(self, name: str, factory):
        if name not in self._repositories:
            self._repositories[name] = factory(self.session)
        return self._repositories[name]

    @property
    def orders(self) -> SqlAlchemyOrderRepository:
        """Lazy-load order repository."""
        return self._repository("orders", SqlAlchemyOrderRepository)

    @property
    def returns(self) -> SqlAlchemyReturnRepository:
        return self._repository("returns", SqlAlchemyReturnRepository)

    @property
    def catalog(self) -> SqlAlchemyCatalogRepository:
        return self._repository("catalog", SqlAlchemyCatalogRepository)

    @property
    def carts(self) -> SqlAlchemyCartRepository:
        return self._repository("carts", SqlAlchemyCartRepository)

    @property
    def sequences(self) -> SqlAlchemySequenceRepository:
        return self._repository("sequences", SqlAlchemySequenceRepository)

    @property
    def store_settings(self) -> SqlAlchemyStoreSettingsRepository:
        return self._repository("store_settings", SqlAlchemyStoreSettingsRepository)

    @property
    def events(self) -> SqlAlchemyEventStore:
        return self._repository("events", SqlAlchemyEventStore)

    async def commit(self) -> None:
        """Commit all pending changes."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback all pending changes."""
        await self.session.rollback()


def create_uow(session_factory: async_sessionmaker) -> UnitOfWork:
    """Create a new Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory)

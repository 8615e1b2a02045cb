"""Data layer - infrastructure persistence and mapping."""

from .mappers import OrderMapper, ReturnMapper
from .models import Base, OrderModel, ReturnModel
from .uow import UnitOfWork, create_uow

__all__ = [
    "Base",
    "create_uow",
    "OrderMapper",
    "OrderModel",
    "ReturnMapper",
    "ReturnModel",
    "UnitOfWork",
]

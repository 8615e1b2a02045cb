"""Domain value objects."""

from .address import Address, CustomerInfo
from .order_code import OrderCode
from .requester import Requester
from .rma_number import RmaNumber
from .value_objects import Money, round_money

__all__ = [
    "Address",
    "CustomerInfo",
    "Money",
    "OrderCode",
    "Requester",
    "RmaNumber",
    "round_money",
]

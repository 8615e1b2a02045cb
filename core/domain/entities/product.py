"""Catalog product read model."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Product:
    """Read-only view of a catalog product used for pricing and snapshots."""
    id: str
    name: str
    price: Decimal
    brand: str = ""
    image: str = ""
    size: str = ""
    category: Optional[str] = None
    stock_count: int = 0

"""
Pricing calculator.

Turns requested lines into priced line snapshots plus order totals. Every
monetary figure is rounded half-up to cents, and the total is summed from
the rounded parts so ``total == subtotal + shipping + tax`` holds exactly.
"""
import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from core.domain.entities.order import OrderItem
from core.domain.enums import ShippingMethod
from core.domain.errors import NotFound, ValidationError
from core.domain.repositories import CatalogRepository
from core.domain.value_objects import round_money
from core.settings.sections.pricing import PricingSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    currency: str = "USD"


@dataclass(frozen=True)
class PricedOrder:
    items: List[OrderItem]
    shipping_method: ShippingMethod
    totals: OrderTotals


def parse_shipping_method(value: Any) -> ShippingMethod:
    if isinstance(value, ShippingMethod):
        return value
    try:
        return ShippingMethod(str(value or ShippingMethod.STANDARD.value).lower())
    except ValueError:
        raise ValidationError(f"Unknown shipping method: {value}")


def parse_quantity(value: Any) -> int:
    """Accept ints and integral strings; reject bools, fractions, and anything below 1."""
    if isinstance(value, bool):
        raise ValidationError("Quantity must be a whole number of at least 1")
    try:
        if isinstance(value, str):
            value = value.strip()
        number = Decimal(str(value))
    except (ArithmeticError, ValueError):
        raise ValidationError(f"Invalid quantity: {value!r}")
    if not number.is_finite() or number != number.to_integral_value() or number < 1:
        raise ValidationError("Quantity must be a whole number of at least 1")
    return int(number)


def shipping_fee(subtotal: Decimal, method: ShippingMethod, settings: PricingSettings) -> Decimal:
    if method == ShippingMethod.STANDARD:
        if subtotal > settings.free_shipping_threshold:
            return Decimal("0.00")
        return settings.standard_shipping_fee
    if method == ShippingMethod.EXPRESS:
        return settings.express_shipping_fee
    if method == ShippingMethod.OVERNIGHT:
        return settings.overnight_shipping_fee
    raise ValidationError(f"Unknown shipping method: {method}")


def compute_totals(subtotal: Decimal, method: ShippingMethod, settings: PricingSettings) -> OrderTotals:
    """Pure arithmetic behind order totals."""
    subtotal = round_money(subtotal)
    shipping = round_money(shipping_fee(subtotal, method, settings))
    tax = round_money(subtotal * settings.tax_rate)
    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=subtotal + shipping + tax,
        currency=settings.currency,
    )


class PricingCalculator:
    """Prices checkout lines against the catalog. Never touches stock."""

    def __init__(self, settings: Optional[PricingSettings] = None) -> None:
        self._settings = settings or PricingSettings()

    @property
    def settings(self) -> PricingSettings:
        return self._settings

    async def price(
        self,
        catalog: CatalogRepository,
        lines: Iterable[Any],
        shipping_method: Any = ShippingMethod.STANDARD,
    ) -> PricedOrder:
        """
        Args:
            catalog: product lookup
            lines: objects or mappings with product_id, quantity, size, color
            shipping_method: tier name

        Raises:
            ValidationError: bad quantity, empty cart, unknown shipping method
            NotFound: a referenced product does not exist
        """
        method = parse_shipping_method(shipping_method)
        lines = [_as_mapping(line) for line in lines]
        if not lines:
            raise ValidationError("Order must contain at least one item")

        quantities = [parse_quantity(line.get("quantity", 1)) for line in lines]
        product_ids = [str(line.get("product_id") or "") for line in lines]
        products = await catalog.get_products(product_ids)

        items: List[OrderItem] = []
        subtotal = Decimal("0")
        for line, product_id, quantity in zip(lines, product_ids, quantities):
            product = products.get(product_id)
            if product is None:
                raise NotFound(f"Product not found: {product_id}")
            items.append(
                OrderItem(
                    id=uuid.uuid4().hex,
                    product_id=product.id,
                    name=product.name,
                    price=round_money(product.price),
                    quantity=quantity,
                    image=product.image,
                    size=line.get("size") or product.size,
                    color=line.get("color"),
                )
            )
            subtotal += product.price * quantity

        totals = compute_totals(subtotal, method, self._settings)
        logger.debug(f"Priced {len(items)} line(s): total={totals.total} {totals.currency}")
        return PricedOrder(items=items, shipping_method=method, totals=totals)


def _as_mapping(line: Any) -> dict:
    if isinstance(line, dict):
        data = dict(line)
        if "productId" in data and "product_id" not in data:
            data["product_id"] = data["productId"]
        return data
    if hasattr(line, "model_dump"):
        return line.model_dump()
    raise ValidationError("Invalid order line")

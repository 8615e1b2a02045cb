"""Tests for the pricing calculator."""
from decimal import Decimal
from typing import Dict, Iterable, Optional

import pytest

from core.application.services.pricing import (
    PricingCalculator,
    compute_totals,
    parse_quantity,
)
from core.domain.entities.product import Product
from core.domain.enums import ShippingMethod
from core.domain.errors import NotFound, ValidationError
from core.domain.repositories import CatalogRepository
from core.settings.sections.pricing import PricingSettings


class StaticCatalog(CatalogRepository):
    def __init__(self, *products: Product):
        self._products = {product.id: product for product in products}

    async def get_product(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    async def get_products(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        return {pid: self._products[pid] for pid in product_ids if pid in self._products}


SHIRT = Product(id="shirt", name="Oxford Shirt", price=Decimal("55.00"), brand="Tailor", image="/s.png", size="M")
SOCKS = Product(id="socks", name="Wool Socks", price=Decimal("49.99"), brand="Knit", image="/k.png", size="L")


@pytest.fixture
def settings() -> PricingSettings:
    return PricingSettings()


def test_free_standard_shipping_above_threshold(settings):
    totals = compute_totals(Decimal("110.00"), ShippingMethod.STANDARD, settings)

    assert totals.shipping == Decimal("0.00")
    assert totals.tax == Decimal("8.80")
    assert totals.total == Decimal("118.80")


def test_threshold_is_exclusive(settings):
    totals = compute_totals(Decimal("100.00"), ShippingMethod.STANDARD, settings)
    assert totals.shipping == Decimal("9.99")


def test_paid_standard_shipping_and_rounding(settings):
    totals = compute_totals(Decimal("99.98"), ShippingMethod.STANDARD, settings)

    assert totals.shipping == Decimal("9.99")
    assert totals.tax == Decimal("8.00")
    assert totals.total == Decimal("117.97")
    assert totals.total == totals.subtotal + totals.shipping + totals.tax


@pytest.mark.parametrize(
    "method, fee",
    [(ShippingMethod.EXPRESS, Decimal("15.99")), (ShippingMethod.OVERNIGHT, Decimal("29.99"))],
)
def test_paid_tiers_ignore_threshold(settings, method, fee):
    totals = compute_totals(Decimal("250.00"), method, settings)
    assert totals.shipping == fee


def test_express_below_threshold_example(settings):
    totals = compute_totals(Decimal("110.00"), ShippingMethod.EXPRESS, settings)

    assert totals.shipping == Decimal("15.99")
    assert totals.tax == Decimal("8.80")
    assert totals.total == Decimal("134.79")


@pytest.mark.parametrize("value, expected", [(1, 1), ("3", 3), (2.0, 2), (" 4 ", 4)])
def test_parse_quantity_accepts_whole_numbers(value, expected):
    assert parse_quantity(value) == expected


@pytest.mark.parametrize("value", [0, -1, 1.5, "two", None, True, "nan"])
def test_parse_quantity_rejects_everything_else(value):
    with pytest.raises(ValidationError):
        parse_quantity(value)


@pytest.mark.asyncio
async def test_price_uses_catalog_prices(settings):
    calculator = PricingCalculator(settings)

    priced = await calculator.price(
        StaticCatalog(SHIRT, SOCKS),
        [{"productId": "shirt", "quantity": 1, "price": "0.01"}, {"product_id": "socks", "quantity": "1", "color": "red"}],
        "express",
    )

    assert [item.price for item in priced.items] == [Decimal("55.00"), Decimal("49.99")]
    assert priced.items[1].color == "red"
    assert priced.items[0].size == "M"
    assert priced.totals.subtotal == Decimal("104.99")
    assert priced.totals.shipping == Decimal("15.99")
    assert priced.shipping_method == ShippingMethod.EXPRESS


@pytest.mark.asyncio
async def test_price_unknown_product_is_not_found(settings):
    with pytest.raises(NotFound):
        await PricingCalculator(settings).price(StaticCatalog(SHIRT), [{"productId": "ghost", "quantity": 1}])


@pytest.mark.asyncio
async def test_price_empty_cart_is_rejected(settings):
    with pytest.raises(ValidationError):
        await PricingCalculator(settings).price(StaticCatalog(SHIRT), [])


@pytest.mark.asyncio
async def test_price_unknown_shipping_method_is_rejected(settings):
    with pytest.raises(ValidationError):
        await PricingCalculator(settings).price(StaticCatalog(SHIRT), [{"productId": "shirt"}], "teleport")

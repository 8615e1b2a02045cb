"""Tests for inbound address normalization."""
from core.application.services import normalize_address


def test_first_and_last_name_are_merged():
    address = normalize_address(
        {"firstName": "Ada", "lastName": "Lovelace", "address": "12 Row", "city": "London",
         "state": "LDN", "postalCode": "N1", "country": "UK"}
    )

    assert address.name == "Ada Lovelace"
    assert address.street == "12 Row"
    assert address.zip_code == "N1"
    assert address.is_complete()


def test_fallback_fills_name_and_phone():
    address = normalize_address(
        {"street": "1 Main", "city": "Town", "state": "ST", "zipCode": "12345", "country": "US"},
        fallback={"name": "Grace Hopper", "phone": "555-0101"},
    )

    assert address.name == "Grace Hopper"
    assert address.phone == "555-0101"


def test_blank_values_leave_address_incomplete():
    address = normalize_address({"name": "Ada", "street": "  ", "city": "London"})

    assert not address.is_complete()
    assert set(address.missing_fields()) == {"street", "state", "zip_code", "country"}


def test_missing_payload_returns_none():
    assert normalize_address(None) is None
    assert normalize_address({}) is None
    assert normalize_address("12 Row, London") is None

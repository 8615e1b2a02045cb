"""Address and customer contact value objects."""
from dataclasses import asdict, dataclass
from typing import Optional

REQUIRED_ADDRESS_FIELDS = ("name", "street", "city", "state", "zip_code", "country")


@dataclass(frozen=True)
class Address:
    """Canonical postal address stored on orders."""
    name: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    phone: Optional[str] = None

    def is_complete(self) -> bool:
        """True when every required field carries a non-blank value."""
        return all(str(getattr(self, f) or "").strip() for f in REQUIRED_ADDRESS_FIELDS)

    def missing_fields(self) -> list[str]:
        return [f for f in REQUIRED_ADDRESS_FIELDS if not str(getattr(self, f) or "").strip()]

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Address":
        return cls(**{k: data.get(k) for k in cls.__dataclass_fields__ if k in data})


@dataclass(frozen=True)
class CustomerInfo:
    """Contact details captured on the order at checkout."""
    name: str
    email: str
    phone: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CustomerInfo":
        return cls(
            name=data.get("name") or "",
            email=data.get("email") or "",
            phone=data.get("phone"),
        )

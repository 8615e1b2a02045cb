"""Identity of the caller performing a ledger operation."""
from dataclasses import dataclass
from typing import Optional

from ..enums import Role


@dataclass(frozen=True)
class Requester:
    """
    Authenticated caller.

    Issued by the upstream auth layer; the ledgers only read it.
    """
    user_id: str
    role: Role = Role.USER
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def owns(self, owner_id: str) -> bool:
        return str(owner_id) == str(self.user_id)

    def can_access(self, owner_id: str) -> bool:
        """Owner or admin."""
        return self.is_admin or self.owns(owner_id)

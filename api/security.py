"""
Caller identity.

Authentication happens upstream; the gateway forwards the verified identity
in ``X-User-*`` headers, on plain requests and websocket upgrades alike.
"""
from typing import Mapping, Optional

from fastapi import Header

from core.domain.enums import Role
from core.domain.errors import Unauthorized
from core.domain.value_objects import Requester


def build_requester(
    user_id: Optional[str],
    role: Optional[str] = None,
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
) -> Optional[Requester]:
    """Requester from forwarded identity values, or None when no user id."""
    if not user_id or not user_id.strip():
        return None

    resolved_role = Role.ADMIN if (role or "").strip().lower() == Role.ADMIN.value else Role.USER
    return Requester(
        user_id=user_id.strip(),
        role=resolved_role,
        name=name,
        email=email,
        phone=phone,
    )


def requester_from_headers(headers: Mapping[str, str]) -> Optional[Requester]:
    """Identity of a websocket upgrade (header lookup is case-insensitive)."""
    return build_requester(
        headers.get("x-user-id"),
        headers.get("x-user-role"),
        headers.get("x-user-name"),
        headers.get("x-user-email"),
        headers.get("x-user-phone"),
    )


async def get_requester(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    x_user_name: Optional[str] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
    x_user_phone: Optional[str] = Header(default=None),
) -> Requester:
    requester = build_requester(x_user_id, x_user_role, x_user_name, x_user_email, x_user_phone)
    if requester is None:
        raise Unauthorized()
    return requester

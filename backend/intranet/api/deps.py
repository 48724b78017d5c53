# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header, Request, status

from intranet.exceptions import AppError
from intranet.models.enums import UserRole
from intranet.schemas.auth import AuthContext


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_role: UserRole = Header(default=UserRole.USER),
) -> AuthContext:
    """Build the caller's identity from the headers set by the auth proxy."""
    return AuthContext(user_id=x_user_id, role=x_role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(
    auth: AuthDep,
) -> AuthContext:
    """Require admin role for the request."""
    if not auth.is_admin:
        raise AppError("Admin access required", status_code=status.HTTP_403_FORBIDDEN)
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]


async def get_client_ip(request: Request) -> str:
    """Resolve the caller's address, preferring proxy headers."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    if request.client is not None:
        return request.client.host
    return "unknown"


ClientIpDep = Annotated[str, Depends(get_client_ip)]

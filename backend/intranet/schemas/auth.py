# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from intranet.models.enums import UserRole


class AuthContext(BaseModel):
    """Authenticated actor for a single request, passed explicitly to services."""

    user_id: uuid.UUID
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

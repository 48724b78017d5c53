# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from intranet.models.enums import AuditAction, AuditEntityType


class AuditLogEntryResponse(BaseModel):
    """A single recorded change."""

    id: uuid.UUID
    actor_id: uuid.UUID
    entity_type: AuditEntityType
    entity_id: uuid.UUID
    action: AuditAction
    before_json: dict[str, Any] | None
    after_json: dict[str, Any] | None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    """Paginated audit entries."""

    items: list[AuditLogEntryResponse]
    total: int

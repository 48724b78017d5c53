# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from intranet.api.deps import AdminDep
from intranet.db import SessionDep
from intranet.models.enums import AuditAction, AuditEntityType
from intranet.schemas.audit import AuditLogListResponse
from intranet.services import audit as audit_service

audit_router = APIRouter(tags=["audit"])


@audit_router.get("/audit-log", response_model=AuditLogListResponse)
async def query_audit_log(
    session: SessionDep,
    auth: AdminDep,
    entity_type: AuditEntityType | None = Query(default=None),
    entity_id: uuid.UUID | None = Query(default=None),
    action: AuditAction | None = Query(default=None),
    actor_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> AuditLogListResponse:
    """Query audit log entries (admin only)."""
    return await audit_service.query_audit_log(
        session,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        actor_id=actor_id,
        offset=offset,
        limit=limit,
    )

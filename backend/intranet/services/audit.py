# ruff: noqa: TC003
"""Audit trail: append entries inside the caller's transaction and read them back."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from intranet.models.audit import AuditLog
from intranet.models.enums import AuditAction, AuditEntityType
from intranet.schemas.audit import AuditLogEntryResponse, AuditLogListResponse

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from intranet.schemas.auth import AuthContext


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Snapshot a row as JSON-safe values (UUIDs and dates become strings)."""
    return model.model_dump(mode="json")


async def write_audit_log(
    session: AsyncSession,
    *,
    auth: AuthContext,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
) -> AuditLog:
    """Stage an audit entry; it commits or rolls back with the change it describes."""
    entry = AuditLog(
        actor_id=auth.user_id,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    return entry


async def query_audit_log(
    session: AsyncSession,
    *,
    entity_type: AuditEntityType | None = None,
    entity_id: uuid.UUID | None = None,
    action: AuditAction | None = None,
    actor_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AuditLogListResponse:
    """Audit entries, newest first, narrowed by any combination of filters."""
    filters = []
    if entity_type is not None:
        filters.append(col(AuditLog.entity_type) == entity_type.value)
    if entity_id is not None:
        filters.append(col(AuditLog.entity_id) == entity_id)
    if action is not None:
        filters.append(col(AuditLog.action) == action.value)
    if actor_id is not None:
        filters.append(col(AuditLog.actor_id) == actor_id)

    count_result = await session.execute(select(func.count()).select_from(AuditLog).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AuditLog).where(*filters).order_by(col(AuditLog.created_at).desc()).offset(offset).limit(limit)
    )

    return AuditLogListResponse(
        items=[
            AuditLogEntryResponse(
                id=e.id,
                actor_id=e.actor_id,
                entity_type=AuditEntityType(e.entity_type),
                entity_id=e.entity_id,
                action=AuditAction(e.action),
                before_json=e.before_json,
                after_json=e.after_json,
                created_at=e.created_at,
            )
            for e in result.scalars().all()
        ],
        total=total,
    )

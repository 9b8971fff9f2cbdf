"""Audit log and current-user endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from eazyliens.application.schemas.audit_log import AuditLogResponse, CurrentUserResponse
from eazyliens.application.services import AuditLogService
from eazyliens.domain.entities import Capability, User
from eazyliens.domain.exceptions import PermissionDeniedError
from eazyliens.infrastructure.dependencies import get_audit_log_service, get_current_user

router = APIRouter(tags=["Audit"])


@router.get("/audit-logs", response_model=list[AuditLogResponse])
async def list_audit_logs(
    limit: int | None = Query(None, ge=1, le=5000),
    service: AuditLogService = Depends(get_audit_log_service),
    user: User = Depends(get_current_user),
) -> list[AuditLogResponse]:
    """Most recent record mutations, newest first."""
    try:
        entries = await service.list_recent(user, limit=limit)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return [
        AuditLogResponse(
            id=entry.id,
            action=entry.action.value,
            record_id=entry.record_id,
            column=entry.column,
            old_value=entry.old_value,
            new_value=entry.new_value,
            username=entry.username,
            created_at=entry.created_at,
        )
        for entry in entries
    ]


@router.get("/users/me", response_model=CurrentUserResponse)
async def current_user(user: User = Depends(get_current_user)) -> CurrentUserResponse:
    """The caller's role and what it allows, so clients can hide what they cannot do."""
    return CurrentUserResponse(
        username=user.username,
        role=user.role.value,
        capabilities=[c.value for c in Capability if user.can(c)],
    )

"""Dropdown option endpoints — bulk read for autocomplete plus list administration."""

from fastapi import APIRouter, Depends, HTTPException, status

from eazyliens.application.schemas.dropdown_option import DropdownOptionRowResponse, OptionWrite
from eazyliens.application.services import DropdownOptionService
from eazyliens.domain.entities import DropdownOptionRow, User
from eazyliens.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidValueError,
    PermissionDeniedError,
)
from eazyliens.infrastructure.dependencies import get_current_user, get_dropdown_option_service

router = APIRouter(prefix="/dropdown-options", tags=["Dropdown Options"])


def _to_response(row: DropdownOptionRow) -> DropdownOptionRowResponse:
    return DropdownOptionRowResponse(id=row.id, values=row.values)


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, DuplicateEntityError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if isinstance(e, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=list[DropdownOptionRowResponse])
async def list_option_rows(
    service: DropdownOptionService = Depends(get_dropdown_option_service),
    _user: User = Depends(get_current_user),
) -> list[DropdownOptionRowResponse]:
    """All option rows; clients group and de-duplicate them per column."""
    return [_to_response(row) for row in await service.list_rows()]


@router.post("", response_model=DropdownOptionRowResponse, status_code=status.HTTP_201_CREATED)
async def add_option(
    data: OptionWrite,
    service: DropdownOptionService = Depends(get_dropdown_option_service),
    user: User = Depends(get_current_user),
) -> DropdownOptionRowResponse:
    try:
        row = await service.add_option(data.column, data.value, user)
    except (DuplicateEntityError, InvalidValueError, PermissionDeniedError) as e:
        raise _http_error(e)
    return _to_response(row)


@router.put("/{row_id}", response_model=DropdownOptionRowResponse)
async def rename_option(
    row_id: int,
    data: OptionWrite,
    service: DropdownOptionService = Depends(get_dropdown_option_service),
    user: User = Depends(get_current_user),
) -> DropdownOptionRowResponse:
    try:
        row = await service.rename_option(row_id, data.column, data.value, user)
    except (
        DuplicateEntityError,
        EntityNotFoundError,
        InvalidValueError,
        PermissionDeniedError,
    ) as e:
        raise _http_error(e)
    return _to_response(row)


@router.delete("/{row_id}/{column}", response_model=DropdownOptionRowResponse)
async def remove_option(
    row_id: int,
    column: str,
    service: DropdownOptionService = Depends(get_dropdown_option_service),
    user: User = Depends(get_current_user),
) -> DropdownOptionRowResponse:
    """Clear one option slot; the row itself stays for later additions."""
    try:
        row = await service.remove_option(row_id, column, user)
    except (EntityNotFoundError, InvalidValueError, PermissionDeniedError) as e:
        raise _http_error(e)
    return _to_response(row)

"""Record grid endpoints — paging/search, single-field writes, colors and export."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from eazyliens.application.schemas.record import (
    CellColorResponse,
    ColorsUpdate,
    FieldUpdate,
    RecordPageResponse,
    RecordResponse,
)
from eazyliens.application.services import RecordService
from eazyliens.config import get_settings
from eazyliens.domain.entities import Record, User
from eazyliens.domain.exceptions import (
    EntityNotFoundError,
    InvalidValueError,
    PermissionDeniedError,
)
from eazyliens.infrastructure.dependencies import (
    get_current_user,
    get_excel_exporter,
    get_record_service,
)
from eazyliens.infrastructure.export.excel_exporter import XLSX_MIME_TYPE, RecordExcelExporter

router = APIRouter(prefix="/records", tags=["Records"])


def _to_response(record: Record) -> RecordResponse:
    return RecordResponse(id=record.id, values=record.values, bg_color=record.bg_color)


def _http_error(e: Exception) -> HTTPException:
    """Translate a domain exception into the matching HTTP error."""
    if isinstance(e, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=RecordPageResponse)
async def list_records(
    search: str = Query("", description="Case-insensitive substring matched against every column"),
    page: int = Query(0, ge=0),
    page_size: int | None = Query(None, ge=1),
    service: RecordService = Depends(get_record_service),
    _user: User = Depends(get_current_user),
) -> RecordPageResponse:
    """Retrieve one page of records, newest first, plus the total match count."""
    settings = get_settings()
    size = min(page_size or settings.default_page_size, settings.max_page_size)
    result = await service.list_records(search=search, page=page, page_size=size)
    return RecordPageResponse(
        items=[_to_response(r) for r in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.get("/export")
async def export_records(
    search: str = Query(""),
    service: RecordService = Depends(get_record_service),
    exporter: RecordExcelExporter = Depends(get_excel_exporter),
    user: User = Depends(get_current_user),
) -> Response:
    """Download every matching record as an .xlsx workbook with the grid's cell colors."""
    try:
        records = await service.list_all(user, search=search)
    except PermissionDeniedError as e:
        raise _http_error(e)
    return Response(
        content=exporter.export(records),
        media_type=XLSX_MIME_TYPE,
        headers={"Content-Disposition": 'attachment; filename="eazyliens.xlsx"'},
    )


@router.get("/{record_id}", response_model=RecordResponse)
async def get_record(
    record_id: int,
    service: RecordService = Depends(get_record_service),
    _user: User = Depends(get_current_user),
) -> RecordResponse:
    """Retrieve a single record by ID."""
    try:
        record = await service.get_record(record_id)
    except EntityNotFoundError as e:
        raise _http_error(e)
    return _to_response(record)


@router.get("/{record_id}/cell-colors", response_model=dict[str, CellColorResponse])
async def get_cell_colors(
    record_id: int,
    service: RecordService = Depends(get_record_service),
    _user: User = Depends(get_current_user),
) -> dict[str, CellColorResponse]:
    """Resolved colors of every cell of a record, as of today."""
    try:
        resolved = await service.resolve_cell_colors(record_id)
    except EntityNotFoundError as e:
        raise _http_error(e)
    return {
        column: CellColorResponse(
            background=color.background,
            text=color.text,
            paintable=color.paintable,
            source=color.source.value,
        )
        for column, color in resolved.items()
    }


@router.post("", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    service: RecordService = Depends(get_record_service),
    user: User = Depends(get_current_user),
) -> RecordResponse:
    """Insert a record holding placeholder values."""
    try:
        record = await service.create_record(user)
    except PermissionDeniedError as e:
        raise _http_error(e)
    return _to_response(record)


@router.patch("/{record_id}/fields", response_model=RecordResponse)
async def update_field(
    record_id: int,
    data: FieldUpdate,
    service: RecordService = Depends(get_record_service),
    user: User = Depends(get_current_user),
) -> RecordResponse:
    """Write one column of a record."""
    try:
        record = await service.update_field(record_id, data.column, data.value, user)
    except (EntityNotFoundError, InvalidValueError, PermissionDeniedError) as e:
        raise _http_error(e)
    return _to_response(record)


@router.put("/{record_id}/colors", response_model=RecordResponse)
async def update_colors(
    record_id: int,
    data: ColorsUpdate,
    service: RecordService = Depends(get_record_service),
    user: User = Depends(get_current_user),
) -> RecordResponse:
    """Replace a record's manual colors; automatically colored cells are ignored."""
    try:
        record = await service.update_colors(record_id, data.colors, user)
    except (EntityNotFoundError, PermissionDeniedError) as e:
        raise _http_error(e)
    return _to_response(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    record_id: int,
    service: RecordService = Depends(get_record_service),
    user: User = Depends(get_current_user),
) -> None:
    """Delete a record by ID."""
    try:
        await service.delete_record(record_id, user)
    except (EntityNotFoundError, PermissionDeniedError) as e:
        raise _http_error(e)

"""Record change stream — SSE endpoint behind the grid's realtime refresh."""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from eazyliens.application.services import ChangeNotifier
from eazyliens.domain.entities import User
from eazyliens.infrastructure.database.session import get_db_session
from eazyliens.infrastructure.dependencies import get_change_notifier, get_current_user

router = APIRouter(prefix="/changes", tags=["Changes"])


@router.get("/stream")
async def record_change_stream(
    notifier: ChangeNotifier = Depends(get_change_notifier),
    _user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> StreamingResponse:
    """SSE endpoint for record table changes.

    Clients connect via EventSource, receive a 'subscribed' handshake and then
    one 'record_change' event per insert, update or delete.
    """
    # The stream can stay open for hours; give back the connection used to identify the caller
    await session.close()
    return StreamingResponse(
        notifier.subscribe(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )

"""Health check endpoint — no database access, always available."""

from fastapi import APIRouter, Depends

from eazyliens.application.services import ChangeNotifier
from eazyliens.config import get_settings
from eazyliens.infrastructure.dependencies import get_change_notifier

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(notifier: ChangeNotifier = Depends(get_change_notifier)) -> dict:
    """Liveness plus the number of grids currently listening for changes."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "change_subscribers": notifier.client_count,
    }

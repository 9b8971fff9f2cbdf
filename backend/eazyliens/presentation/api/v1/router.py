"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from eazyliens.presentation.api.v1.endpoints.health import router as health_router
from eazyliens.presentation.api.v1.endpoints.records import router as records_router
from eazyliens.presentation.api.v1.endpoints.dropdown_options import router as dropdown_options_router
from eazyliens.presentation.api.v1.endpoints.audit_logs import router as audit_logs_router
from eazyliens.presentation.api.v1.endpoints.changes import router as changes_router
from eazyliens.presentation.api.v1.endpoints.color_rules import router as color_rules_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(records_router)
router.include_router(dropdown_options_router)
router.include_router(audit_logs_router)
router.include_router(changes_router)
router.include_router(color_rules_router)

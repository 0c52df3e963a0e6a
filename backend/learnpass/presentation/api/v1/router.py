"""V1 API router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from learnpass.presentation.api.v1.endpoints.health import router as health_router
from learnpass.presentation.api.v1.endpoints.workflow import router as workflow_router
from learnpass.presentation.api.v1.endpoints.certificates import router as certificates_router
from learnpass.presentation.api.v1.endpoints.entitlements import router as entitlements_router
from learnpass.presentation.api.v1.endpoints.entitlements import admin_router as admin_entitlements_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(workflow_router)
router.include_router(certificates_router)
router.include_router(entitlements_router)
router.include_router(admin_entitlements_router)

from fastapi import APIRouter

from hyenescores.api.admin.managers import router as managers_router
from hyenescores.api.admin.matchdays import router as matchdays_router
from hyenescores.api.admin.records import router as records_router
from hyenescores.api.admin.imports import router as imports_router

router = APIRouter(prefix="/admin")
router.include_router(managers_router)
router.include_router(matchdays_router)
router.include_router(records_router)
router.include_router(imports_router)

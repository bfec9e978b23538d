from fastapi import APIRouter

from hyenescores.api.data import router as data_router
from hyenescores.api.admin.router import router as admin_router

api_router = APIRouter()

# League document
api_router.include_router(data_router)

# Admin API
api_router.include_router(admin_router)

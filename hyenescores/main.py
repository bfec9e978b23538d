import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hyenescores.config import get_settings
from hyenescores.schemas.admin import OperationResponse, OperationStatus
from hyenescores.services import InvalidDocumentError, PersistenceError
from hyenescores.store import StoreNotConfiguredError

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.store_backend == "rest" and not settings.rest_configured:
        logger.warning("Store not configured: reads serve an empty document, writes are refused")
    yield
    # Shutdown
    if settings.store_backend == "sql":
        from hyenescores.database import engine

        await engine.dispose()


app = FastAPI(
    title="HyeneScores Backend",
    description="League results, palmares and pantheon for amateur football leagues",
    version="2.0.0",
    lifespan=lifespan,
)

# CORS
_origins = (
    settings.allowed_origins.split(",")
    if settings.allowed_origins != "*"
    else ["*"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _failed(status_code: int, message: str) -> JSONResponse:
    body = OperationResponse(status=OperationStatus.FAILED, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(StoreNotConfiguredError)
async def store_not_configured_handler(request: Request, exc: StoreNotConfiguredError):
    return _failed(503, exc.message)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _failed(502, exc.message)


@app.exception_handler(InvalidDocumentError)
async def invalid_document_handler(request: Request, exc: InvalidDocumentError):
    return _failed(422, str(exc))


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# Import and include routers after app is created
from hyenescores.api.router import api_router
app.include_router(api_router, prefix="/api/v1")

import uuid
from pathlib import Path

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import APIRouter, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator

from . import __version__
from .config import Settings, get_settings
from .routers.athletes import router as athletes_router
from .routers.auth import router as auth_router
from .routers.my import router as my_router
from .routers.sessions import router as sessions_router
from .routers.tags import router as tags_router
from .services.session_service import UPLOADS_URL_PREFIX

API_PREFIX = "/api"
REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger(__name__)


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # browsers reject credentials with a wildcard origin
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name=REQUEST_ID_HEADER,
        generator=lambda: str(uuid.uuid4()),
        update_request_header=True,
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def _api_router() -> APIRouter:
    router = APIRouter(prefix=API_PREFIX)
    router.include_router(auth_router)
    router.include_router(athletes_router)
    router.include_router(sessions_router)
    router.include_router(tags_router)
    router.include_router(my_router)
    return router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Assemble the API: routers under /api, /health, /metrics and the uploaded videos."""
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Training-session video tagging and athlete analytics",
    )

    Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
    _add_middleware(app, settings)
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(_api_router())

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=upload_dir, check_dir=False), name="uploads")

    logger.info("app_created", env=settings.app_env, upload_dir=str(upload_dir))
    return app

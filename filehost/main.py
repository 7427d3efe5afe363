from typing import Optional
import logging

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filehost.api.router import api_router
from filehost.core.config import Settings, get_settings
from filehost.core.database import Database
from filehost.core.logging_config import configure_logging
from filehost.core.redis import RedisClient
from filehost.core.storage import FileStorage
from filehost.utils.exceptions import FileHostException

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION} ({settings.ENVIRONMENT})")

    if settings.JWT_SECRET_KEY == Settings.model_fields["JWT_SECRET_KEY"].default:
        logger.warning("JWT_SECRET_KEY not set, using fallback. Set JWT_SECRET_KEY for production!")

    app.state.storage.ensure_root()
    await app.state.database.init()
    await app.state.cache.connect()

    yield

    logger.info("Shutting down...")
    await app.state.cache.disconnect()
    await app.state.database.dispose()


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    msg = errors[0].get("msg", "Invalid request")
    # pydantic prefixes messages raised from validators
    return msg.removeprefix("Value error, ")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(FileHostException)
    async def filehost_exception_handler(request: Request, exc: FileHostException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"}
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.storage = FileStorage(settings)
    app.state.cache = RedisClient(settings.REDIS_URL, settings.CACHE_TTL_SECONDS)

    # Set up CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        return {
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": f"{settings.API_PREFIX}/docs",
            "redoc": f"{settings.API_PREFIX}/redoc",
            "health": "/health",
            "api": settings.API_PREFIX
        }

    @app.get("/health")
    async def health_check():
        database_status = "healthy" if await app.state.database.ping() else "unhealthy"

        cache: RedisClient = app.state.cache
        if not cache.url:
            cache_status = "disabled"
        else:
            cache_status = "healthy" if await cache.ping() else "unhealthy"

        degraded = database_status != "healthy" or cache_status == "unhealthy"
        return {
            "status": "degraded" if degraded else "healthy",
            "services": {
                "database": database_status,
                "cache": cache_status
            }
        }

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.BACKEND_HOST, port=settings.BACKEND_PORT)


if __name__ == "__main__":
    run()

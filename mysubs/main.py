"""
FastAPI application factory
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse

from mysubs.api.deps import build_repository
from mysubs.api.errors import register_exception_handlers
from mysubs.api.middleware import (
    AccessLogMiddleware,
    ErrorLoggingMiddleware,
    RequestIdFilter,
    RequestIdMiddleware,
)
from mysubs.api.v1 import subscriptions
from mysubs.application.subscriptions import CheckReadinessUseCase
from mysubs.config import Settings, get_settings
from mysubs.domain.repository import SubscriptionRepository

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] req_id=%(request_id)s %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())


def create_app(
    settings: Settings | None = None,
    repository: SubscriptionRepository | None = None,
) -> FastAPI:
    """
    Application factory - создаёт и настраивает FastAPI приложение

    Args:
        settings: Defaults to environment settings
        repository: Defaults to the backend selected by STORAGE_BACKEND

    Returns:
        Настроенный FastAPI app
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)
    logger.info("configuration: %s", settings.describe())

    if repository is None:
        repository = build_repository(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("start application...")
        yield
        logger.info("stop application...")
        app.state.repository.close()

    app = FastAPI(
        title="my-subs",
        description="Subscriptions CRUD and total cost aggregation",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository

    # Middleware (last added runs first)
    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(subscriptions.router)

    # Health checks
    @app.get("/healthz", response_class=PlainTextResponse, tags=["health"])
    def healthz():
        """Liveness probe (не зависит от БД)"""
        return "ok"

    @app.get("/readyz", response_class=PlainTextResponse, tags=["health"])
    async def readyz():
        """Readiness probe (пингует хранилище)"""
        use_case = CheckReadinessUseCase(app.state.repository, settings.REQUEST_TIMEOUT_SECONDS)
        if not await use_case.execute():
            return JSONResponse(status_code=503, content={"error": ""})
        return "ready"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "mysubs.main:app",
        host=_settings.APP_HOST,
        port=_settings.APP_PORT,
        log_level=_settings.LOG_LEVEL.lower(),
    )

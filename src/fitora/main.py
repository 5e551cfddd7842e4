"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from fitora.api.otp import router as otp_router
from fitora.api.users import router as users_router
from fitora.config import Settings, settings
from fitora.database.engine import async_session_factory, init_db
from fitora.otp.store import OTPStore
from fitora.otp.sweeper import ExpirySweeper
from fitora.services.email_service import EmailService

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle hook."""
    config: Settings = app.state.settings
    logger.info("Starting %s (%s) …", config.app_name, config.environment)
    await init_db(app.state.session_factory.kw.get("bind"))
    logger.info("Database initialised")

    sweeper = None
    if config.otp_sweep_interval_seconds > 0:
        sweeper = ExpirySweeper(app.state.otp_store, config.otp_sweep_interval_seconds)
        sweeper.start()
    yield
    if sweeper is not None:
        await sweeper.stop()
    logger.info("Shutting down %s …", config.app_name)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    logger.debug("Rejected request to %s: %s", request.url.path, errors)
    return JSONResponse(status_code=400, content={"success": False, "message": message})


async def _server_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error. Please try again later."},
    )


def create_app(
    config: Settings | None = None,
    *,
    otp_store: OTPStore | None = None,
    email_service: EmailService | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """Build the application with its long-lived collaborators on ``app.state``."""
    config = config or settings

    app = FastAPI(
        title=f"{config.app_name} API",
        description="Email OTP verification and password reset for the Fitora try-on shop",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.otp_store = otp_store or OTPStore(
        ttl_seconds=config.otp_ttl_seconds,
        max_attempts=config.otp_max_attempts,
    )
    app.state.email_service = email_service or EmailService(config)
    app.state.session_factory = session_factory or async_session_factory

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _server_error)

    app.include_router(otp_router)
    app.include_router(users_router)

    @app.get("/health")
    async def health_check():
        """Simple liveness probe."""
        return {"status": "healthy", "app": config.app_name}

    return app


app = create_app()

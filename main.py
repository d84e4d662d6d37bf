# main.py
import sys
import time
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError as SettingsError
from sqlalchemy.exc import SQLAlchemyError
import structlog
import uvicorn

from auth import auth_router, build_password_context
from config import Settings, get_settings
from database import init_db
from errors import register_exception_handlers
from logging_config import configure_logging
from account import profile_router
from router import router
from sessions import InMemorySessionStorage, SessionManager

logger = structlog.get_logger(__name__)


def create_app(settings: Settings = None, sessions: SessionManager = None) -> FastAPI:
    settings = settings or get_settings()
    init_db(settings.database_url)

    app = FastAPI(title="Trackify Personal Finance API")
    app.state.settings = settings
    app.state.sessions = sessions or SessionManager(
        InMemorySessionStorage(), ttl=timedelta(days=settings.session_ttl_days)
    )
    app.state.pwd_context = build_password_context(settings.bcrypt_rounds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                "request",
                method=request.method,
                path=request.url.path,
                status=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

    register_exception_handlers(app)

    app.include_router(auth_router, prefix="/api", tags=["authentication"])
    app.include_router(router, prefix="/api", tags=["expenses"])
    app.include_router(profile_router, prefix="/api", tags=["profile"])

    @app.get("/")
    def home():
        return {"message": "Welcome to Trackify Personal Finance API"}

    return app


def main():
    try:
        settings = get_settings()
    except SettingsError as exc:
        configure_logging()
        logger.error("config_invalid", error=str(exc))
        sys.exit(1)

    configure_logging(settings.log_level, settings.log_json)
    logger.info("connecting_to_database")
    try:
        app = create_app(settings)
    except SQLAlchemyError as exc:
        logger.error("database_unreachable", error=str(exc))
        sys.exit(1)
    logger.info("database_connected")

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

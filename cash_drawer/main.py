"""
Cash Drawer Ledger: FastAPI application.

create_app() builds the application from an explicit Settings
object: logging, database engine, session factory and routers.
The module-level `app` is what an ASGI server imports.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cash_drawer.config import Settings, get_settings
from cash_drawer.logging_config import configure_logging, get_logger
from cash_drawer.models.base import build_engine, build_session_factory
from cash_drawer.api.health import router as health_router
from cash_drawer.api.caja import router as caja_router

logger = get_logger("main")


def create_app(settings: Settings) -> FastAPI:
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Cash drawer ledger: open, record, reconcile and close",
        debug=settings.DEBUG,
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # The admin front end is served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router)
    app.include_router(caja_router)

    logger.info(
        "app_created",
        extra={"environment": settings.ENVIRONMENT, "version": settings.APP_VERSION},
    )
    return app


app = create_app(get_settings())

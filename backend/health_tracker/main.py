"""FastAPI application entry point."""
import logging
from typing import Optional
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from health_tracker.config import Settings, settings
from health_tracker.database import Base, make_engine, make_session_factory
from health_tracker.dependencies import get_optional_user
from health_tracker.errors import register_error_handlers

# Import routers
from health_tracker.routers import auth, users, alerts, diagnostic_tests

# Import all models so Base.metadata knows about them
from health_tracker.models.user import User
from health_tracker.models.alert import Alert                    # noqa: F401
from health_tracker.models.diagnostic_test import DiagnosticTest  # noqa: F401

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the app; the engine and session factory live on ``app.state``."""
    app_settings = app_settings or settings
    logging.basicConfig(
        level=app_settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Health Tracker",
        description="Personal health records — alerts and diagnostic test results",
        version="0.1.0",
    )
    app.state.settings = app_settings

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # Register routers
    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(alerts.router, prefix="/api/alerts", tags=["Alerts"])
    app.include_router(diagnostic_tests.router, prefix="/api/diagnostic-tests", tags=["DiagnosticTests"])

    @app.on_event("startup")
    def on_startup():
        """Open the store; create tables directly in SQLite dev mode."""
        engine = make_engine(app_settings.DATABASE_URL)
        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)
        if app_settings.DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
        logger.info("Connected to %s", engine.url.render_as_string(hide_password=True))

    @app.on_event("shutdown")
    def on_shutdown():
        app.state.engine.dispose()

    @app.get("/api/health")
    def health_check(user: Optional[User] = Depends(get_optional_user)):
        return {"status": "ok", "authenticated": user is not None}

    return app


app = create_app()

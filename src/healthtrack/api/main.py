"""FastAPI application factory."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from healthtrack.config import get_settings
from healthtrack.db.engine import ensure_user, get_engine, init_db
from healthtrack.api.routes import settings as settings_routes
from healthtrack.api.routes import sleep, summary, users, water, weight


def create_app(engine=None) -> FastAPI:
    """Build and return the FastAPI app.

    Args:
        engine: SQLAlchemy engine to initialise on startup. Defaults to the
            module-level engine from get_engine().
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables and the default user on startup (idempotent)
        config = get_settings()
        db_engine = engine or get_engine()
        init_db(db_engine)
        ensure_user(db_engine, config.user_id, config.default_username)
        yield

    app = FastAPI(
        title="HealthTrack API",
        description="Weight, water and sleep tracking backend",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/api/health", tags=["health"])
    def health_check():
        return {"status": "ok", "message": "HealthTrack service is running"}

    app.include_router(users.router, prefix="/api", tags=["users"])
    app.include_router(weight.router, prefix="/api", tags=["weight"])
    app.include_router(water.router, prefix="/api", tags=["water"])
    app.include_router(sleep.router, prefix="/api", tags=["sleep"])
    app.include_router(settings_routes.router, prefix="/api", tags=["settings"])
    app.include_router(summary.router, prefix="/api", tags=["summary"])

    return app


# Module-level app instance for uvicorn
app = create_app()

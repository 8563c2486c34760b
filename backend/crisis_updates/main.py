from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from crisis_updates.core.config import Settings, settings as default_settings
from crisis_updates.core.logging import setup_logging
from crisis_updates.core.exceptions import (
    NotFound,
    global_exception_handler,
    http_exception_handler,
    not_found_handler,
    validation_exception_handler,
)
from crisis_updates.services.crisis_store import CrisisUpdateStore

logger = structlog.get_logger()


def create_app(settings: Optional[Settings] = None, store: Optional[CrisisUpdateStore] = None) -> FastAPI:
    """
    Build the API around one store instance.
    A fresh store is created per app unless one is passed in.
    """
    settings = settings or default_settings
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifecycle manager: restores the store on startup and saves it on
        shutdown when snapshot persistence is enabled.
        """
        logger.info("startup", project=settings.PROJECT_NAME, persistence=settings.PERSISTENCE_ENABLED)
        if not settings.PERSISTENCE_ENABLED:
            yield
            logger.info("shutdown")
            return

        from crisis_updates.db.init_db import init_db
        from crisis_updates.db.session import build_engine, build_session_factory
        from crisis_updates.services.snapshot_service import SnapshotService

        engine = build_engine(settings.DATABASE_URL)
        session_factory = build_session_factory(engine)
        try:
            await init_db(engine)
            await SnapshotService.restore_store(session_factory, app.state.store)
        except Exception as e:
            logger.error("snapshot_load_failed", error=str(e))
            await engine.dispose()
            raise

        try:
            yield
        finally:
            try:
                await SnapshotService.persist_store(session_factory, app.state.store)
            except Exception as e:
                logger.error("snapshot_save_failed", error=str(e))
                raise
            finally:
                await engine.dispose()
                logger.info("shutdown")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Crisis update bulletins: create, read, search, update and delete",
        lifespan=lifespan,
        docs_url=f"{settings.API_V1_STR}/docs",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
    )
    app.state.store = store if store is not None else CrisisUpdateStore()

    # Middleware: CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception Handlers
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(NotFound, not_found_handler)

    # Health Check
    @app.get("/health", tags=["system"])
    def health_check():
        """
        Public health check endpoint for load balancers.
        """
        return {
            "status": "ok",
            "environment": settings.ENVIRONMENT,
            "records": len(app.state.store),
        }

    from crisis_updates.api.v1 import crisis_updates

    app.include_router(crisis_updates.router, prefix=f"{settings.API_V1_STR}/crisis-updates", tags=["crisis-updates"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("crisis_updates.main:app", host="0.0.0.0", port=8000, reload=True)

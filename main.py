import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError

from admin import auth_router as admin_auth_router
from admin import router as admin_router
from config import Settings, get_settings
from database import Database, DatabaseConfigurationError
from resources import CONTENT_ROUTERS

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.mongo_uri, settings.database_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A missing connection string stops startup here.
        database.connect()
        database.ensure_indexes()
        yield
        database.close()

    # ==================
    # FastAPI app config
    # ==================
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.started_at = time.monotonic()
    app.state.request_count = 0

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def count_requests(request: Request, call_next):
        request.app.state.request_count += 1
        return await call_next(request)

    @app.exception_handler(DatabaseConfigurationError)
    async def database_not_configured(request: Request, exc: DatabaseConfigurationError):
        logger.error("Database not configured: %s", exc)
        return JSONResponse(status_code=503, content={"detail": "Database not configured"})

    @app.exception_handler(PyMongoError)
    async def database_error(request: Request, exc: PyMongoError):
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Database error"})

    # ======
    # Routes
    # ======
    @app.get("/")
    def root():
        return {"status": "ok", "service": "portfolio-api", "message": "Portfolio API is running..."}

    @app.get("/test-db")
    def test_database():
        status = database.status()
        return {
            "backend": "running",
            "database": "connected" if status.ok else "not-available",
            "error": status.error,
            "collections": status.collections[:10],
        }

    for prefix, router, tag in CONTENT_ROUTERS:
        app.include_router(router, prefix=prefix, tags=[tag])
    app.include_router(admin_auth_router, prefix="/api/admin", tags=["admin"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    return app


def run() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()

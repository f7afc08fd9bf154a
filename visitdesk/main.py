"""VisitDesk: visitor check-in kiosk and admin dashboard (FastAPI application)."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from visitdesk.config import Settings, get_settings
from visitdesk.routers import admin, visitors
from visitdesk.seed import seed_default_admin, seed_sample_visitors
from visitdesk.services.auth import AdminSessions
from visitdesk.storage import Storage, build_storage

log = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    store: Storage = app.state.storage
    log.info("Storage backend: %s", type(store).__name__)
    seed_default_admin(store, settings)
    if settings.seed_sample_visitors:
        seed_sample_visitors(store)
    yield
    store.close()


def create_app(settings: Settings | None = None, storage: Storage | None = None) -> FastAPI:
    """Build the app around one storage handle. The handle is seeded on startup
    and closed on shutdown. Serve with `uvicorn --factory visitdesk.main:create_app`."""
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage if storage is not None else build_storage(settings)
    app.state.sessions = AdminSessions(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(visitors.router)
    app.include_router(admin.router)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        # Malformed kiosk/admin input is a client error, reported as 400
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.get("/")
    def root():
        return {"app": settings.app_name, "status": "ok"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app

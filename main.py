import logging
import os
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from config import (
    ALLOWED_HOSTS, ALLOWED_ORIGINS, DATABASE_URL, USE_MOCK_DATA, configure_logging,
)
from database import make_engine, make_session_factory, init_db
from dependencies import limiter
from errors import NotFoundError, ValidationError, CollaboratorUnavailable
from services import InMemoryRecordStore, SqlRecordStore

# Routers
from routers.tasks import router as tasks_router
from routers.projects import router as projects_router
from routers.calendar import router as calendar_router
from routers.analytics import router as analytics_router
from routers.time_entries import router as time_entries_router
from routers.clients import router as clients_router

logger = logging.getLogger(__name__)


# Custom Rate Limit Handler
def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded):
    limit_info = str(exc.limit) if hasattr(exc, "limit") else "the"
    return JSONResponse(
        status_code=429,
        content={"detail": f"Too many requests ({limit_info} limit exceeded). Please wait a moment."},
    )


def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def unavailable_handler(request: Request, exc: CollaboratorUnavailable):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# Custom Middleware for Security Headers
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["Content-Security-Policy"] = "default-src 'self'; script-src 'self' 'unsafe-inline' 'unsafe-eval'; style-src 'self' 'unsafe-inline';"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        return response


def default_store():
    if USE_MOCK_DATA:
        logger.info("USE_MOCK_DATA set, serving records from memory")
        return InMemoryRecordStore(), None
    engine = make_engine(DATABASE_URL)
    return SqlRecordStore(make_session_factory(engine)), engine


def create_app(store=None, clock=date.today) -> FastAPI:
    """
    Build the API. Tests pass their own store (usually an InMemoryRecordStore)
    and a fixed clock; otherwise the store follows USE_MOCK_DATA/DATABASE_URL.
    """
    engine = None
    if store is None:
        store, engine = default_store()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if engine is not None:
            init_db(engine)
        yield
        if engine is not None:
            engine.dispose()

    app = FastAPI(title="TaskMaster Pro", lifespan=lifespan)
    app.state.store = store
    app.state.clock = clock

    # Rate Limiter Setup (Globally available via app.state.limiter)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(CollaboratorUnavailable, unavailable_handler)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        # Allow explicit origins only (Strict CORS)
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=ALLOWED_HOSTS)

    # Include Routers
    app.include_router(tasks_router)
    app.include_router(projects_router)
    app.include_router(calendar_router)
    app.include_router(analytics_router)
    app.include_router(time_entries_router)
    app.include_router(clients_router)

    # Mount Static Files (Frontend)
    frontend_build_path = os.path.join(os.path.dirname(__file__), 'frontend', 'build')
    if os.path.exists(frontend_build_path):
        app.mount("/", StaticFiles(directory=frontend_build_path, html=True), name="static")
    else:
        logger.info("Frontend build not found at %s, serving API only", frontend_build_path)

    return app


configure_logging()
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

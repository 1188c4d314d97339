import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from genbooks.api.api import api_router
from genbooks.core.config import Settings, settings as default_settings
from genbooks.core.helpers import now_iso
from genbooks.core.rate_limit import LoginRateLimiter
from genbooks.core.security import AdminCredentials
from genbooks.services.notification_service import NotificationService
from genbooks.storage import OrderStore, new_store

# Logging Configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def create_app(settings: Optional[Settings] = None, store: Optional[OrderStore] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.started_at = time.monotonic()
        app.state.store = store or new_store(settings)
        await app.state.store.initialize()
        app.state.notifier = NotificationService(settings)
        app.state.rate_limiter = LoginRateLimiter(
            max_attempts=settings.LOGIN_MAX_ATTEMPTS,
            lockout_seconds=settings.LOGIN_LOCKOUT_SECONDS,
            capacity=settings.LOGIN_TRACKER_CAPACITY,
        )
        app.state.admin_credentials = AdminCredentials.from_settings(settings)
        if not app.state.admin_credentials.configured:
            logger.warning("ADMIN_USERNAME / ADMIN_PASSWORD not set; admin login is disabled.")
        logger.info("Database initialized successfully")
        yield
        await app.state.store.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(o) for o in settings.BACKEND_CORS_ORIGINS] or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Signed cookie session; re-issued on every response so the 24h expiry slides
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET,
        session_cookie="sessionId",
        max_age=settings.SESSION_MAX_AGE,
        same_site="lax",
        https_only=settings.is_production,
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix=API_PREFIX)

    @app.get("/health", tags=["health"])
    async def health_check(request: Request):
        return {
            "status": "healthy",
            "timestamp": now_iso(),
            "database": request.app.state.store.backend,
            "uptime": time.monotonic() - request.app.state.started_at,
        }

    @app.get(f"{API_PREFIX}/status", tags=["health"])
    async def api_status(request: Request):
        database = "connected" if request.app.state.store.backend == "supabase" else "file-storage"
        return {
            "status": "operational",
            "version": settings.VERSION,
            "database": database,
            "endpoints": api_endpoints(app),
        }

    # Must be registered last so real API routes win
    @app.api_route(f"{API_PREFIX}/{{path:path}}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
                   include_in_schema=False)
    async def api_not_found(path: str):
        raise HTTPException(status_code=404, detail="API endpoint not found")

    return app


def api_endpoints(app: FastAPI) -> list:
    paths = []
    for route in app.routes:
        path = getattr(route, "path", "")
        if not getattr(route, "include_in_schema", False) or path in paths:
            continue
        paths.append(path)
    return sorted(paths)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Rich bodies are passed as dict details; plain strings become {"error": ...}
        content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            details.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg"))
        return JSONResponse(status_code=400, content={"error": "Invalid input", "details": details})

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "message": "Please try again later"},
        )


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("genbooks.main:app", host="0.0.0.0", port=default_settings.PORT, proxy_headers=True)


if __name__ == "__main__":
    run()

"""
FastAPI application entry point.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rbac_admin.core.config import settings
from rbac_admin.core.exceptions import DomainError
from rbac_admin.core.logging import configure_logging
from rbac_admin.core.rbac import (
    AuthorizationError,
    AuthorizationGate,
    Enforcer,
    PolicyAdmin,
    PolicyError,
    PolicySynchronizer,
)
from rbac_admin.core.rbac.store import SqlAlchemyPolicyStore
from rbac_admin.api.routes import router as api_router
from rbac_admin.api.middleware import LoggingMiddleware, RequestIdMiddleware

logger = structlog.get_logger(__name__)


def wire_policy_engine(app: FastAPI, session_factory) -> PolicyAdmin:
    """Create the engine components and attach them to app.state."""
    enforcer = Enforcer()
    store = SqlAlchemyPolicyStore(session_factory)
    synchronizer = PolicySynchronizer(enforcer, store)

    app.state.enforcer = enforcer
    app.state.synchronizer = synchronizer
    app.state.policy_admin = PolicyAdmin(enforcer, store, synchronizer)
    app.state.gate = AuthorizationGate(enforcer)
    return app.state.policy_admin


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    from rbac_admin.models.database import async_session_factory, close_db, init_db
    from rbac_admin.utils.seed import seed_defaults

    # Startup
    await init_db()
    policy_admin = wire_policy_engine(app, async_session_factory)

    if settings.rbac.seed_defaults:
        async with async_session_factory() as db:
            await seed_defaults(db)

    if settings.rbac.sync_on_startup:
        try:
            await policy_admin.synchronize()
        except PolicyError:
            # Requests are rejected with 500 until a synchronization succeeds.
            logger.error("rbac.startup_sync_failed", exc_info=True)

    reconcile_task = None
    if settings.rbac.reconcile_interval_seconds > 0:
        reconcile_task = asyncio.create_task(
            policy_admin.synchronizer.run_periodic(settings.rbac.reconcile_interval_seconds)
        )

    yield

    # Shutdown
    if reconcile_task is not None:
        reconcile_task.cancel()
        with suppress(asyncio.CancelledError):
            await reconcile_task
    await close_db()


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Create and configure FastAPI application."""
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan if use_lifespan else None,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Middleware (last added is outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(api_router, prefix="/api")

    # Exception handlers
    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        headers = None
        if exc.status_code == 401:
            logger.info("auth.rejected", path=request.url.path, reason=exc.detail)
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "message": exc.public_message},
            headers=headers,
        )

    @app.exception_handler(PolicyError)
    async def policy_error_handler(request: Request, exc: PolicyError):
        logger.warning("policy.request_failed", error=str(exc), code=exc.code)
        message = str(exc) if exc.status_code < 500 else exc.public_message
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "message": message},
        )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "message": exc.message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": getattr(exc, "code", "http_error"), "message": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.exception("request.unhandled_error", path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": str(exc) if settings.debug else "An error occurred",
            },
        )

    # Health checks
    @app.get("/health")
    async def health_check(request: Request):
        """Liveness, with the policy engine state."""
        enforcer: Enforcer | None = getattr(request.app.state, "enforcer", None)
        initialized = bool(enforcer and enforcer.initialized)
        return {
            "status": "healthy" if initialized else "degraded",
            "version": settings.app_version,
            "environment": settings.environment,
            "rbac": {
                "initialized": initialized,
                "policies": enforcer.count() if enforcer else 0,
                "policy_version": enforcer.version if enforcer else 0,
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rbac_admin.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers,
    )

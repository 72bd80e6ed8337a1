"""Storefront FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from identity.domain import identity
from ordering.domain import ordering
from shared.access import NotAuthenticated, PermissionDenied
from shared.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/users": identity,
    "/auth": identity,
    "/products": ordering,
    "/cart": ordering,
    "/orders": ordering,
    "/invoices": ordering,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path == prefix or path.startswith(prefix + "/"):
            return domain
    return None


def _register_access_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotAuthenticated)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticated) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={"error": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(PermissionDenied)
    async def permission_denied_handler(request: Request, exc: PermissionDenied) -> JSONResponse:
        return JSONResponse(status_code=403, content={"error": exc.message})

    @app.exception_handler(ExpectedVersionError)
    async def conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
        logger.warning("write_conflict", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=409,
            content={"error": "The resource was modified concurrently; retry the request"},
        )


def create_app(lifespan=None) -> FastAPI:
    """Build the API. Domains must already be initialized (see ``lifespan``)."""
    app = FastAPI(
        title="Storefront API",
        description="Storefront backend: identity, carts, orders and invoices",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the correct Protean domain context for each request."""
        add_context(method=request.method, path=request.url.path)
        try:
            domain = _resolve_domain(request.url.path)
            if domain is not None:
                with domain.domain_context():
                    return await call_next(request)
            # No domain match: pass through (health check, docs, etc.)
            return await call_next(request)
        finally:
            clear_context()

    register_exception_handlers(app)
    _register_access_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    from identity.api.routes import auth_router, user_router
    from ordering.api.routes import cart_router, invoice_router, order_router, product_router

    app.include_router(user_router)
    app.include_router(auth_router)
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(invoice_router)

    # -----------------------------------------------------------------------
    # Health / root
    # -----------------------------------------------------------------------
    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domains": {
                    "identity": {"name": identity.name},
                    "ordering": {"name": ordering.name},
                },
            }
        )

    return app


@asynccontextmanager
async def initialize_domains(app: FastAPI):
    # PROTEAN_ENV selects the config overlay (e.g. "production" → sqlite)
    identity.init()
    ordering.init()
    logger.info("Domains initialized", domains=[identity.name, ordering.name])
    yield


app = create_app(lifespan=initialize_domains)

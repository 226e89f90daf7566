"""Marketplace FastAPI application factory.

Commands are processed synchronously inside the request; every request
runs inside the marketplace domain context.
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.api.cart import router as cart_router
from marketplace.api.catalog import menu_item_router, vendor_router
from marketplace.api.checkout import router as checkout_router
from marketplace.api.delivery import router as delivery_router
from marketplace.api.errors import register_error_handlers
from marketplace.api.notifications import router as notifications_router
from marketplace.api.orders import router as orders_router
from marketplace.api.payments import router as payments_router
from marketplace.api.profiles import router as profiles_router
from marketplace.domain import marketplace
from marketplace.utils.logging import add_context, clear_context

ROUTERS = (
    profiles_router,
    vendor_router,
    menu_item_router,
    cart_router,
    checkout_router,
    orders_router,
    delivery_router,
    payments_router,
    notifications_router,
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Marketplace API",
        description="Multi-vendor food marketplace: carts, checkout, orders, delivery and payments",
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
        """Push the marketplace domain context and request-scoped log context."""
        clear_context()
        add_context(
            request_id=request.headers.get("x-request-id") or uuid4().hex[:12],
            method=request.method,
            path=request.url.path,
        )
        with marketplace.domain_context():
            response = await call_next(request)
        return response

    for router in ROUTERS:
        app.include_router(router)

    register_error_handlers(app)

    @app.get("/health")
    async def health():
        return JSONResponse({"status": "ok", "service": "marketplace"})

    return app

# storefront/api/__init__.py
from fastapi import FastAPI

from storefront.api.errors import register_error_handlers
from storefront.api.routers import carts, coupons, health, orders, users


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Cart & Order Service",
        version="1.0.0",
    )

    register_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(carts.router)
    app.include_router(coupons.router)
    app.include_router(orders.router)

    return app

# qrmenu/api/__init__.py
from fastapi import FastAPI

from qrmenu.api.routers import health, carts, orders, statistics


def create_app() -> FastAPI:
    app = FastAPI(
        title="QR Menu Ordering Service",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(statistics.router)

    return app

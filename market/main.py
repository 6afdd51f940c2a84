# market/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from market.api.errors import register_error_handlers
from market.api.routers import auth, books, cart, categories, health, library, orders, seller
from market.data.database import init_db
from market.utils.settings import CORS_ORIGINS, SEED_ON_STARTUP
from market.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database schema")
    init_db()
    if SEED_ON_STARTUP:
        from market.data.seed import seed

        seed()
    logger.info("Database ready")
    yield


def create_app(lifespan_handler=lifespan) -> FastAPI:
    app = FastAPI(
        title="Ebook Market",
        version="1.0.0",
        lifespan=lifespan_handler,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(books.router)
    app.include_router(categories.router)
    app.include_router(cart.router)
    app.include_router(orders.router)
    app.include_router(library.router)
    app.include_router(seller.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)

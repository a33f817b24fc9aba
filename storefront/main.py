# storefront/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from storefront.api.errors import register_error_handlers
from storefront.api.routers import carts, health, orders, products, users
from storefront.data.database import Base, engine
from storefront.domain.ports import ListingCache
from storefront.services.cache_service import RedisListingCache
from storefront.utils.logging import get_logger

# all models have to be registered before create_all
import storefront.data.models  # noqa: F401

logger = get_logger(__name__)


def create_app(listing_cache: ListingCache | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")

        app.state.listing_cache = listing_cache or RedisListingCache.from_url()
        try:
            yield
        finally:
            close = getattr(app.state.listing_cache, "close", None)
            if close is not None:
                close()

    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(products.admin_router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(users.router)
    app.include_router(users.admin_router)
    app.include_router(users.superadmin_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)

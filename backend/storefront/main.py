import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api import catalog, categories, dashboard, orders, products
from storefront.core.config import settings
from storefront.core.logging import configure_logging
from storefront.db.base import engine

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Starting %s %s", settings.PROJECT_NAME, VERSION)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Camera storefront catalog, checkout and admin API",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(catalog.router)
app.include_router(orders.router)
app.include_router(categories.router)
app.include_router(products.router)
app.include_router(orders.admin_router)
app.include_router(dashboard.router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "version": VERSION}


if __name__ == "__main__":
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, reload=False)

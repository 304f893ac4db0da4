# -*- coding: utf-8 -*-
"""Main file to start FastAPI application."""
import logging.config
import os
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI
from app_checkout.config import get_settings
from app_checkout.gateway.niubiz_client import NiubizClient
from app_checkout.routers import checkout_router, product_router
from app_checkout.sql import init_db
from app_checkout.sql.database import Base, SessionLocal, engine

# Configure logging ################################################################################
logging.config.fileConfig(
    os.path.join(os.path.dirname(__file__), "logging.ini"), disable_existing_loggers=False
)
logger = logging.getLogger(__name__)


# App Lifespan #####################################################################################
@asynccontextmanager
async def lifespan(__app: FastAPI):
    """Lifespan context manager."""
    # ConfigurationError propagates: the app does not serve with bad credentials.
    settings = get_settings()
    logger.info("Starting up (Niubiz %s, merchant %s)", settings.environment, settings.merchant_id)

    logger.info("Creating database tables")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with SessionLocal() as session:
        await init_db(session)

    __app.state.niubiz_client = NiubizClient(settings)
    try:
        yield
    finally:
        logger.info("Closing Niubiz client")
        await __app.state.niubiz_client.aclose()
        logger.info("Shutting down database")
        await engine.dispose()


# OpenAPI Documentation ############################################################################
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
logger.info("Running app version %s", APP_VERSION)
DESCRIPTION = """
Checkout con la pasarela Niubiz: security token, sesión de pago y autorización.
"""

tag_metadata = [
    {
        "name": "Product",
        "description": "Endpoints para **consultar** el catálogo.",
    },
    {
        "name": "Checkout",
        "description": "Endpoints para **iniciar** y **confirmar** pagos con Niubiz.",
    },
]

app = FastAPI(
    redoc_url=None,  # disable redoc documentation.
    title="FastAPI - Niubiz checkout",
    description=DESCRIPTION,
    version=APP_VERSION,
    servers=[{"url": "/", "description": "Development"}],
    license_info={
        "name": "MIT License",
        "url": "https://choosealicense.com/licenses/mit/",
    },
    openapi_tags=tag_metadata,
    lifespan=lifespan,
)

app.include_router(product_router.router)
app.include_router(checkout_router.router)

if __name__ == "__main__":
    uvicorn.run("app_checkout.main:app", host="0.0.0.0", port=5003, reload=True)

#python -m uvicorn app_checkout.main:app --reload --port 5003

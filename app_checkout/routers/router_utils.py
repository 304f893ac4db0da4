# -*- coding: utf-8 -*-
"""Util/Helper functions for router definitions."""
import logging
from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app_checkout.config import NiubizSettings, get_settings
from app_checkout.gateway.niubiz_client import NiubizClient
from app_checkout.services.checkout_service import CheckoutService
from app_checkout.sql.database import get_db
from app_checkout.sql.repositories import OrderStore, ProductCatalog, TransactionStore

logger = logging.getLogger(__name__)


def raise_and_log_error(my_logger, status_code: int, message: str):
    """Raises HTTPException and logs an error."""
    my_logger.error(message)
    raise HTTPException(status_code=status_code, detail=message)


def get_gateway(request: Request) -> NiubizClient:
    """Niubiz client opened in the app lifespan."""
    return request.app.state.niubiz_client


def get_catalog(db: AsyncSession = Depends(get_db)) -> ProductCatalog:
    return ProductCatalog(db)


def get_checkout_service(
    db: AsyncSession = Depends(get_db),
    gateway: NiubizClient = Depends(get_gateway),
    settings: NiubizSettings = Depends(get_settings),
) -> CheckoutService:
    return CheckoutService(
        products=ProductCatalog(db),
        orders=OrderStore(db),
        payments=TransactionStore(db),
        gateway=gateway,
        settings=settings,
    )

# -*- coding: utf-8 -*-
"""Catalog endpoints."""
import logging
from typing import List
from fastapi import APIRouter, Depends
from app_checkout.routers.router_utils import get_catalog
from app_checkout.sql import schemas
from app_checkout.sql.repositories import ProductCatalog

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/products",
    tags=["Product"]
)


@router.get(
    "",
    response_model=List[schemas.Product],
    summary="Retrieve product list",
)
async def get_product_list(catalog: ProductCatalog = Depends(get_catalog)):
    """Retrieve the products that can be bought."""
    logger.debug("GET '/products' endpoint called.")
    return await catalog.list()

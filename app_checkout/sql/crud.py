# -*- coding: utf-8 -*-
"""Functions that interact with the database."""
import logging
from decimal import Decimal
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from . import models

logger = logging.getLogger(__name__)


# Products #########################################################################################
async def get_product(db: AsyncSession, product_id: str):
    """Load a product from the database."""
    return await get_element_by_id(db, models.Product, product_id)


async def get_product_list(db: AsyncSession):
    """Load all the products, cheapest first."""
    stmt = select(models.Product).order_by(models.Product.price, models.Product.name)
    return await get_list_statement_result(db, stmt)


async def count_products(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(models.Product))
    return result.scalar_one()


async def add_products(db: AsyncSession, products):
    """Insert catalog items.

    Numeric(18, 2) on SQLite stores a float and rounds half-even on the way
    back, so prices with more than 2 decimals are refused here.
    """
    for product in products:
        price = Decimal(str(product.price))
        if price != price.quantize(Decimal("0.01")):
            raise ValueError(f"Precio con más de 2 decimales: {product.name} {product.price}")
    db.add_all(products)
    await db.commit()


# Orders ###########################################################################################
async def get_order_by_purchase_number(db: AsyncSession, purchase_number: str):
    stmt = select(models.Order).where(models.Order.purchase_number == purchase_number)
    return await get_element_statement_result(db, stmt)


async def create_order(db: AsyncSession, order: models.Order) -> models.Order:
    return await save_element(db, order)


async def update_order(db: AsyncSession, order: models.Order) -> models.Order:
    return await save_element(db, order)


# Payment transactions #############################################################################
async def get_transaction_by_order_id(db: AsyncSession, order_id: str):
    """Newest transaction of an order.

    Nothing stops two transactions from pointing at the same order; the most
    recently created one wins (id breaks ties).
    """
    stmt = (
        select(models.PaymentTransaction)
        .where(models.PaymentTransaction.order_id == order_id)
        .order_by(
            models.PaymentTransaction.created_at.desc(),
            models.PaymentTransaction.id.desc(),
        )
        .limit(1)
    )
    return await get_element_statement_result(db, stmt)


async def create_transaction(db: AsyncSession, txn: models.PaymentTransaction):
    return await save_element(db, txn)


async def update_transaction(db: AsyncSession, txn: models.PaymentTransaction):
    return await save_element(db, txn)


# Generic functions ################################################################################
# WRITE
async def save_element(db: AsyncSession, element):
    """Add (or re-attach) an element, commit and refresh it."""
    db.add(element)
    await db.commit()
    await db.refresh(element)
    return element


# READ
async def get_list_statement_result(db: AsyncSession, stmt):
    """Execute given statement and return list of items."""
    result = await db.execute(stmt)
    item_list = result.unique().scalars().all()
    return item_list


async def get_element_statement_result(db: AsyncSession, stmt):
    """Execute statement and return a single items"""
    result = await db.execute(stmt)
    item = result.scalars().first()
    return item


async def get_element_by_id(db: AsyncSession, model, element_id):
    """Retrieve any DB element by id."""
    if element_id is None:
        return None

    element = await db.get(model, element_id)
    return element

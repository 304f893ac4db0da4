# -*- coding: utf-8 -*-
"""Catalog and stores bound to one AsyncSession, as consumed by CheckoutService."""
from sqlalchemy.ext.asyncio import AsyncSession
from . import crud, models


class ProductCatalog:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, product_id: str) -> models.Product | None:
        return await crud.get_product(self.db, product_id)

    async def list(self) -> list[models.Product]:
        return list(await crud.get_product_list(self.db))


class OrderStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_purchase_number(self, purchase_number: str) -> models.Order | None:
        return await crud.get_order_by_purchase_number(self.db, purchase_number)

    async def add(self, order: models.Order) -> None:
        await crud.create_order(self.db, order)

    async def update(self, order: models.Order) -> None:
        await crud.update_order(self.db, order)


class TransactionStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_order_id(self, order_id: str) -> models.PaymentTransaction | None:
        return await crud.get_transaction_by_order_id(self.db, order_id)

    async def add(self, txn: models.PaymentTransaction) -> None:
        await crud.create_transaction(self.db, txn)

    async def update(self, txn: models.PaymentTransaction) -> None:
        await crud.update_transaction(self.db, txn)

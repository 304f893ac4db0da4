# -*- coding: utf-8 -*-
"""Collaborators CheckoutService depends on."""
from decimal import Decimal
from typing import Optional, Protocol

from app_checkout.sql import models
from app_checkout.sql.schemas import AuthorizationResult


class ProductCatalog(Protocol):
    async def get_by_id(self, product_id: str) -> Optional[models.Product]: ...

    async def list(self) -> list[models.Product]: ...


class OrderStore(Protocol):
    async def get_by_purchase_number(self, purchase_number: str) -> Optional[models.Order]: ...

    async def add(self, order: models.Order) -> None: ...

    async def update(self, order: models.Order) -> None: ...


class TransactionStore(Protocol):
    async def get_by_order_id(self, order_id: str) -> Optional[models.PaymentTransaction]: ...

    async def add(self, txn: models.PaymentTransaction) -> None: ...

    async def update(self, txn: models.PaymentTransaction) -> None: ...


class PaymentGateway(Protocol):
    async def get_security_token(self) -> str: ...

    async def create_session(self, security_token: str, amount: Decimal,
                             purchase_number: str, currency: str) -> str: ...

    async def authorize(self, security_token: str, transaction_token: str, amount: Decimal,
                        currency: str, purchase_number: str) -> AuthorizationResult: ...

# -*- coding: utf-8 -*-
"""Database models definitions. Table representations as class."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from .database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """Catalog item. Read-only for the checkout flows."""
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)

    def __init__(self, **kwargs):
        kwargs.setdefault("id", _new_id())
        super().__init__(**kwargs)


class Order(Base):
    """One checkout attempt."""
    STATUS_PENDING = "Pending"
    STATUS_PAID = "Paid"
    STATUS_REJECTED = "Rejected"
    # Declared, never set by init/confirm.
    STATUS_ERROR = "Error"

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=_new_id)
    purchase_number = Column(String(20), nullable=False, unique=True, index=True)
    amount = Column(Numeric(18, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="PEN")
    status = Column(String(16), nullable=False, default=STATUS_PENDING)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    customer_email = Column(String(256), nullable=True)

    def __init__(self, **kwargs):
        kwargs.setdefault("id", _new_id())
        kwargs.setdefault("status", self.STATUS_PENDING)
        kwargs.setdefault("created_at", _utcnow())
        super().__init__(**kwargs)


class PaymentTransaction(Base):
    """Gateway-side record attached to one order."""
    STATUS_INIT = "INIT"
    STATUS_SESSION_CREATED = "SESSION_CREATED"
    STATUS_AUTHORIZED = "AUTHORIZED"
    STATUS_DECLINED = "DECLINED"

    __tablename__ = "payment_transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    order_id = Column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    session_key = Column(String(256), nullable=True)
    transaction_token = Column(String(256), nullable=True)
    authorization_code = Column(String(64), nullable=True)
    masked_card = Column(String(32), nullable=True)
    status = Column(String(32), nullable=False, default=STATUS_INIT)
    raw_response = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __init__(self, **kwargs):
        kwargs.setdefault("id", _new_id())
        kwargs.setdefault("status", self.STATUS_INIT)
        kwargs.setdefault("created_at", _utcnow())
        super().__init__(**kwargs)

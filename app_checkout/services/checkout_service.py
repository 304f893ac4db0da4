# -*- coding: utf-8 -*-
"""Checkout flows: init (order + Niubiz session) and confirm (authorization)."""
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from app_checkout.config import NiubizSettings
from app_checkout.exceptions import NotFoundError
from app_checkout.gateway.niubiz_client import round_amount
from app_checkout.services.contracts import OrderStore, PaymentGateway, ProductCatalog, TransactionStore
from app_checkout.sql import models, schemas

logger = logging.getLogger(__name__)

MSG_APPROVED = "Pago aprobado"
MSG_DECLINED = "Pago rechazado"
MSG_SESSION_MISSING = "SessionKey no encontrado para la orden"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_purchase_number(now: datetime) -> str:
    """yyMMddHHmmss in UTC: 12 digits, sortable.

    Two checkouts started within the same second get the same number.
    """
    return now.astimezone(timezone.utc).strftime("%y%m%d%H%M%S")


class CheckoutService:
    """Drives one purchase through the Niubiz handshake.

    Every step runs after the previous one: the session needs the security
    token and the transaction record needs the session key. Nothing written
    by init is rolled back when a later step or confirm fails.
    """

    def __init__(
        self,
        products: ProductCatalog,
        orders: OrderStore,
        payments: TransactionStore,
        gateway: PaymentGateway,
        settings: NiubizSettings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.products = products
        self.orders = orders
        self.payments = payments
        self.gateway = gateway
        self.currency = settings.currency
        self.merchant_id = settings.merchant_id
        self.static_js_url = settings.static_js_url
        self.clock = clock

    async def init(self, product_id: str, customer_email: Optional[str] = None) -> schemas.CheckoutInitResult:
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Producto no encontrado")

        order = models.Order(
            purchase_number=generate_purchase_number(self.clock()),
            amount=round_amount(product.price),
            currency=self.currency,
            status=models.Order.STATUS_PENDING,
            customer_email=customer_email,
        )
        await self.orders.add(order)
        logger.info("Orden %s creada por %s %s", order.purchase_number, order.amount, order.currency)

        security_token = await self.gateway.get_security_token()
        session_key = await self.gateway.create_session(
            security_token, order.amount, order.purchase_number, order.currency
        )

        txn = models.PaymentTransaction(
            order_id=order.id,
            session_key=session_key,
            status=models.PaymentTransaction.STATUS_SESSION_CREATED,
        )
        await self.payments.add(txn)

        return schemas.CheckoutInitResult(
            merchant_id=self.merchant_id,
            session_key=session_key,
            purchase_number=order.purchase_number,
            amount=order.amount,
            currency=order.currency,
            static_js_url=self.static_js_url,
        )

    async def confirm(self, purchase_number: str, transaction_token: str) -> schemas.ConfirmResult:
        order = await self.orders.get_by_purchase_number(purchase_number)
        if order is None:
            raise NotFoundError("Orden no encontrada")

        security_token = await self.gateway.get_security_token()

        txn = await self.payments.get_by_order_id(order.id)
        if txn is None or not (txn.session_key or "").strip():
            logger.warning("Orden %s sin sessionKey, no se autoriza", purchase_number)
            return schemas.ConfirmResult(
                success=False,
                outcome="session_missing",
                purchase_number=order.purchase_number,
                message=MSG_SESSION_MISSING,
                raw_json="{}",
            )

        auth = await self.gateway.authorize(
            security_token, transaction_token, order.amount, order.currency, order.purchase_number
        )

        # No lock: two concurrent confirms of the same order can interleave here.
        order.status = models.Order.STATUS_PAID if auth.approved else models.Order.STATUS_REJECTED
        await self.orders.update(order)

        txn.transaction_token = transaction_token
        txn.authorization_code = auth.authorization_code
        txn.masked_card = auth.masked_card
        txn.status = (
            models.PaymentTransaction.STATUS_AUTHORIZED
            if auth.approved
            else models.PaymentTransaction.STATUS_DECLINED
        )
        txn.raw_response = auth.raw_json
        await self.payments.update(txn)

        logger.info("Orden %s: %s", purchase_number, order.status)
        return schemas.ConfirmResult(
            success=auth.approved,
            outcome="approved" if auth.approved else "declined",
            purchase_number=order.purchase_number,
            authorization_code=auth.authorization_code,
            message=MSG_APPROVED if auth.approved else MSG_DECLINED,
            masked_card=auth.masked_card,
            raw_json=auth.raw_json,
        )

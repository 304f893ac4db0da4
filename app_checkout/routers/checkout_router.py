# -*- coding: utf-8 -*-
"""Checkout endpoints: open a Niubiz session and confirm the authorization."""
import logging
from typing import Optional
from fastapi import APIRouter, Cookie, Depends, Form, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from app_checkout.exceptions import GatewayError, NotFoundError
from app_checkout.routers.router_utils import get_checkout_service, raise_and_log_error
from app_checkout.services.checkout_service import CheckoutService
from app_checkout.sql import crud, schemas
from app_checkout.sql.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/checkout",
    tags=["Checkout"]
)

LAST_PURCHASE_COOKIE = "LastPurchaseNumber"
LAST_PURCHASE_MAX_AGE = 30 * 60


@router.get(
    "/pay/{product_id}",
    summary="Create order and Niubiz session for a product",
    response_model=schemas.CheckoutInitResult,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": schemas.Message, "description": "Product not found"},
        status.HTTP_502_BAD_GATEWAY: {"model": schemas.Message, "description": "Niubiz error"},
    },
)
async def pay(
    product_id: str,
    response: Response,
    email: Optional[str] = None,
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """Returns what the browser needs to render the Niubiz payment form."""
    logger.debug("GET '/checkout/pay/%s' endpoint called.", product_id)
    try:
        init = await checkout.init(product_id, email)
    except NotFoundError:
        raise_and_log_error(
            logger, status.HTTP_404_NOT_FOUND,
            "Producto no encontrado. Refresca la lista e inténtalo otra vez."
        )
    except GatewayError as exc:
        raise_and_log_error(logger, status.HTTP_502_BAD_GATEWAY, str(exc))

    # Keeps the purchase number if the widget posts back without it
    response.set_cookie(
        LAST_PURCHASE_COOKIE,
        init.purchase_number,
        max_age=LAST_PURCHASE_MAX_AGE,
        httponly=True,
        secure=True,
        samesite="lax",
    )
    return init


@router.post(
    "/confirm",
    summary="Authorize the transaction token returned by the Niubiz widget",
    response_model=schemas.ConfirmResult,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": schemas.Message, "description": "Order not found"},
        status.HTTP_502_BAD_GATEWAY: {"model": schemas.Message, "description": "Niubiz error"},
    },
)
async def confirm(
    response: Response,
    purchase_number: Optional[str] = Form(None, alias="purchaseNumber"),
    transaction_token: Optional[str] = Form(None, alias="transactionToken"),
    token_id: Optional[str] = Form(None, alias="tokenId"),
    token: Optional[str] = Form(None),
    last_purchase_number: Optional[str] = Cookie(None, alias=LAST_PURCHASE_COOKIE),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """Declines come back as a ConfirmResult with success=false, not as an HTTP error."""
    logger.debug("POST '/checkout/confirm' endpoint called.")
    pn = purchase_number if (purchase_number or "").strip() else last_purchase_number
    if last_purchase_number is not None:
        response.delete_cookie(LAST_PURCHASE_COOKIE)

    tok = transaction_token or token_id or token
    if not (tok or "").strip():
        return schemas.ConfirmResult(
            success=False,
            outcome="missing_input",
            purchase_number=pn or "-",
            message="No se recibió token de transacción",
        )
    if not (pn or "").strip():
        return schemas.ConfirmResult(
            success=False,
            outcome="missing_input",
            purchase_number="-",
            message="No se recibió purchaseNumber",
        )

    try:
        return await checkout.confirm(pn, tok)
    except NotFoundError as exc:
        raise_and_log_error(logger, status.HTTP_404_NOT_FOUND, str(exc))
    except GatewayError as exc:
        raise_and_log_error(logger, status.HTTP_502_BAD_GATEWAY, str(exc))


@router.get(
    "/orders/{purchase_number}",
    summary="Retrieve an order by purchase number",
    responses={
        status.HTTP_200_OK: {"model": schemas.Order, "description": "Requested order."},
        status.HTTP_404_NOT_FOUND: {"model": schemas.Message, "description": "Order not found"},
    },
    response_model=schemas.Order,
)
async def get_order(purchase_number: str, db: AsyncSession = Depends(get_db)):
    """Used by the result page to show the final order status."""
    logger.debug("GET '/checkout/orders/%s' endpoint called.", purchase_number)
    order = await crud.get_order_by_purchase_number(db, purchase_number)
    if not order:
        raise_and_log_error(logger, status.HTTP_404_NOT_FOUND, f"Orden {purchase_number} no encontrada")
    return order


@router.get(
    "/health",
    summary="Health check endpoint",
    response_model=schemas.Message,
)
async def health_check():
    """Endpoint to check if everything started correctly."""
    logger.debug("GET '/checkout/health' endpoint called.")
    return {"detail": "OK"}

# -*- coding: utf-8 -*-
"""Errors that abort a checkout flow.

Business-level negative outcomes (missing session data, declined card,
unreadable authorization body) are NOT exceptions: they are returned as a
ConfirmResult with success=False.
"""


class CheckoutError(Exception):
    """Base class for errors that stop an Init/Confirm call."""


class ConfigurationError(CheckoutError):
    """Merchant credentials or gateway endpoints are missing or invalid."""


class NotFoundError(CheckoutError):
    """Unknown product id or purchase number."""


class GatewayError(CheckoutError):
    """The payment gateway answered with an error or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

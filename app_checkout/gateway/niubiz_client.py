# -*- coding: utf-8 -*-
"""HTTP client for the Niubiz e-commerce API.

Three calls, always in this order:

1. security token (Basic auth, ISO-8859-1 credentials),
2. payment session (returns the sessionKey for the browser widget),
3. authorization of the transaction token produced by the widget.

The security token is never cached: every caller asks for a fresh one.
"""
import base64
import json
import logging
from decimal import Decimal, ROUND_HALF_UP

import httpx

from app_checkout.config import NiubizSettings
from app_checkout.exceptions import ConfigurationError, GatewayError
from app_checkout.gateway import response_rules
from app_checkout.sql.schemas import AuthorizationResult

logger = logging.getLogger(__name__)

CHANNEL = "web"
CENT = Decimal("0.01")


def round_amount(value) -> Decimal:
    """Two decimals, half away from zero."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    """Wire format shared by session and authorization: '79.90', no grouping."""
    return format(round_amount(amount), "f")


def basic_credentials(username: str, password: str) -> str:
    """base64 of 'user:password' encoded as ISO-8859-1, as the security API expects."""
    try:
        raw = f"{username}:{password}".encode("iso-8859-1")
    except UnicodeEncodeError as exc:
        raise ConfigurationError("Credenciales Niubiz con caracteres no ISO-8859-1") from exc
    return base64.b64encode(raw).decode("ascii")


class NiubizClient:
    """Implements the security / session / authorization handshake."""

    def __init__(self, settings: NiubizSettings, http_client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._http = http_client or httpx.AsyncClient(
            timeout=settings.timeout_seconds,
            headers={"Accept": "application/json"},
        )

    async def aclose(self):
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._http.post(url, **kwargs)
        except httpx.TransportError as exc:
            logger.error("Niubiz no respondió (%s): %s", url, exc)
            raise GatewayError(f"Niubiz no respondió: {exc.__class__.__name__}") from exc

    # Security ####################################################################################
    async def get_security_token(self) -> str:
        """Fetch a new security token."""
        if not self.settings.username or not self.settings.password:
            raise ConfigurationError("Credenciales Niubiz no configuradas (Username/Password).")

        credentials = basic_credentials(self.settings.username, self.settings.password)
        response = await self._post(
            self.settings.endpoint(self.settings.security_endpoint),
            content=b"",
            headers={
                "Authorization": f"Basic {credentials}",
                "Content-Type": "text/plain; charset=utf-8",
                "Accept": "*/*",
            },
        )
        body = response.text

        if not response.is_success:
            logger.error("Security token rechazado: %s %s", response.status_code, body)
            raise GatewayError(
                f"No se pudo obtener el security token (HTTP {response.status_code}): {body}",
                status_code=response.status_code,
                body=body,
            )

        token = body.strip().strip('"')
        if not token:
            raise GatewayError("Security token vacío", status_code=response.status_code, body=body)
        return token

    # Session #####################################################################################
    def build_session_body(self, amount: Decimal, purchase_number: str) -> dict:
        antifraud = self.settings.antifraud
        return {
            "channel": CHANNEL,
            "amount": format_amount(amount),
            "antifraud": {
                "clientIp": antifraud.client_ip,
                "merchantDefineData": dict(antifraud.merchant_define_data),
            },
            "purchaseNumber": purchase_number,
            "recurrenceMaxAmount": format_amount(amount),
        }

    async def create_session(self, security_token: str, amount: Decimal,
                             purchase_number: str, currency: str) -> str:
        """Open a payment session and return its sessionKey.

        currency is part of the handshake signature but the session body does not carry it.
        """
        body = self.build_session_body(amount, purchase_number)
        logger.debug("JSON enviado a Niubiz (sesión): %s", json.dumps(body))

        response = await self._post(
            self.settings.endpoint(self.settings.session_endpoint),
            json=body,
            headers={"Authorization": security_token},
        )
        text = response.text
        if not response.is_success:
            logger.error("Error creando sesión: %s %s", response.status_code, text)
            raise GatewayError("No se pudo crear la sesión", status_code=response.status_code, body=text)

        try:
            document = json.loads(text)
        except (ValueError, RecursionError):
            document = None

        session_key = None
        if isinstance(document, dict):
            session_key = document.get("sessionKey")
            if session_key is None:
                session_key = document.get("sessionkey")

        if not isinstance(session_key, str) or not session_key.strip():
            logger.error("Respuesta sesión sin sessionKey: %s", text)
            raise GatewayError("Respuesta de sesión inválida", status_code=response.status_code, body=text)
        return session_key

    # Authorization ###############################################################################
    def build_authorization_body(self, transaction_token: str, amount: Decimal,
                                 currency: str, purchase_number: str) -> dict:
        card_holder = self.settings.card_holder
        formatted = format_amount(amount)
        return {
            "captureType": "manual",
            "cardHolder": {
                "documentNumber": card_holder.document_number,
                "documentType": card_holder.document_type,
            },
            "channel": CHANNEL,
            "countable": True,
            "order": {
                "amount": formatted,
                "currency": currency,
                "purchaseNumber": purchase_number,
                "tokenId": transaction_token,
            },
            "recurrence": {
                "amount": formatted,
                "beneficiaryId": "0",
                "frequency": "FALSE",
                "maxAmount": formatted,
                "type": "",
            },
        }

    async def authorize(self, security_token: str, transaction_token: str, amount: Decimal,
                        currency: str, purchase_number: str) -> AuthorizationResult:
        """Authorize the card token. Never raises on the response content.

        Whatever the HTTP status, the body is logged and parsed: the gateway
        answers declines with non-2xx codes that still carry an action code.
        """
        body = self.build_authorization_body(transaction_token, amount, currency, purchase_number)
        logger.debug("JSON enviado a Niubiz (autorización): %s", json.dumps(body))

        response = await self._post(
            self.settings.endpoint(self.settings.authorization_endpoint),
            json=body,
            headers={"Authorization": security_token},
        )
        text = response.text
        logger.info("Respuesta autorización: %s %s", response.status_code, text)
        return parse_authorization(text)


def parse_authorization(text: str) -> AuthorizationResult:
    """Best-effort reading of an authorization body; denial by default."""
    try:
        document = json.loads(text)
    except (ValueError, RecursionError):
        logger.warning("Respuesta de autorización no es JSON válido")
        return AuthorizationResult(approved=False, raw_json=text)

    if not isinstance(document, dict):
        return AuthorizationResult(approved=False, raw_json=text)

    return AuthorizationResult(
        approved=response_rules.is_approved(document),
        authorization_code=response_rules.authorization_code(document),
        masked_card=response_rules.masked_card(document),
        raw_json=text,
    )

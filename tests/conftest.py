"""
Pytest configuration and fixtures.
"""
import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app_checkout.config import NiubizSettings, load_settings
from app_checkout.gateway.niubiz_client import NiubizClient
from app_checkout.services.checkout_service import CheckoutService
from app_checkout.sql import models
from app_checkout.sql.database import Base

MERCHANT_ID = "341198210"
BASE_URL = "https://apisandbox.vnforappstest.com"
SECURITY_URL = BASE_URL + "/api.security/v1/security"
SESSION_URL = BASE_URL + f"/api.ecommerce/v2/ecommerce/token/session/{MERCHANT_ID}"
AUTHORIZATION_URL = BASE_URL + f"/api.authorization/v3/authorization/ecommerce/{MERCHANT_ID}"

APPROVED_BODY = json.dumps({
    "header": {"ecoreTransactionUUID": "c3f4", "millis": 812},
    "order": {
        "purchaseNumber": "251019143005",
        "amount": 79.9,
        "currency": "PEN",
        "authorizationCode": "A1",
        "actionCode": "000",
    },
    "dataMap": {
        "ACTION_CODE": "000",
        "STATUS": "Authorized",
        "CARD": "411111******1111",
        "AUTHORIZATION_CODE": "A1",
    },
})

DECLINED_BODY = json.dumps({
    "errorCode": 400,
    "errorMessage": "NOT AUTHORIZED",
    "data": {
        "ACTION_CODE": "051",
        "STATUS": "Not Authorized",
        "CARD": {"CARDNUMBER": "455788******1234"},
    },
})


@pytest.fixture
def test_settings() -> NiubizSettings:
    """Create test settings."""
    return load_settings(
        environment="qa",
        merchant_id=MERCHANT_ID,
        username="integraciones@niubiz.com.pe",
        password="_7z3@8fF",
        currency="PEN",
        _env_file=None,
    )


class FakeNiubiz:
    """httpx transport handler playing the Niubiz API.

    Responses are (status, body) per URL; every request is recorded.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses = {
            SECURITY_URL: (201, '"eyJraWQiOiJ0ZXN0In0.token"'),
            SESSION_URL: (200, json.dumps({"sessionKey": "sk-123", "expirationTime": 1700000000})),
            AUTHORIZATION_URL: (200, APPROVED_BODY),
        }

    def respond(self, url: str, status_code: int, body: str):
        self.responses[url] = (status_code, body)

    def requests_to(self, url: str) -> list[httpx.Request]:
        return [request for request in self.requests if str(request.url) == url]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, body = self.responses[str(request.url)]
        return httpx.Response(status_code, text=body)


@pytest.fixture
def fake_niubiz() -> FakeNiubiz:
    return FakeNiubiz()


@pytest_asyncio.fixture
async def niubiz_client(test_settings, fake_niubiz) -> AsyncGenerator[NiubizClient, Any]:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_niubiz))
    async with NiubizClient(test_settings, http_client=http_client) as client:
        yield client


@pytest_asyncio.fixture
async def test_db() -> AsyncGenerator[AsyncSession, Any]:
    """In-memory SQLite session with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


# In-memory collaborators ##########################################################################
class InMemoryCatalog:
    def __init__(self, products):
        self.items = {product.id: product for product in products}

    async def get_by_id(self, product_id):
        return self.items.get(product_id)

    async def list(self):
        return list(self.items.values())


class InMemoryOrderStore:
    def __init__(self):
        self.items = []

    async def get_by_purchase_number(self, purchase_number):
        return next((o for o in self.items if o.purchase_number == purchase_number), None)

    async def add(self, order):
        self.items.append(order)

    async def update(self, order):
        assert order in self.items


class InMemoryTransactionStore:
    def __init__(self):
        self.items = []

    async def get_by_order_id(self, order_id):
        return next((t for t in reversed(self.items) if t.order_id == order_id), None)

    async def add(self, txn):
        self.items.append(txn)

    async def update(self, txn):
        assert txn in self.items


@pytest.fixture
def mouse() -> models.Product:
    return models.Product(id="p-mouse", name="Mouse", price=Decimal("79.90"))


@pytest.fixture
def frozen_clock() -> Callable[[], datetime]:
    return lambda: datetime(2025, 10, 19, 14, 30, 5, 400000, tzinfo=timezone.utc)


@pytest.fixture
def stores(mouse):
    return InMemoryCatalog([mouse]), InMemoryOrderStore(), InMemoryTransactionStore()


@pytest.fixture
def checkout(stores, niubiz_client, test_settings, frozen_clock) -> CheckoutService:
    catalog, orders, payments = stores
    return CheckoutService(
        products=catalog,
        orders=orders,
        payments=payments,
        gateway=niubiz_client,
        settings=test_settings,
        clock=frozen_clock,
    )

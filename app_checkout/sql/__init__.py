import logging
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from . import crud, models

logger = logging.getLogger(__name__)

SEED_PRODUCTS = (
    ("Laptop", Decimal("3999.99")),
    ("Mouse", Decimal("79.90")),
    ("Teclado", Decimal("149.00")),
)


async def init_db(session: AsyncSession):
    """Seed the demo catalog when the products table is empty."""
    if await crud.count_products(session) > 0:
        return

    logger.info("Inicializando catálogo de productos (%d items)", len(SEED_PRODUCTS))
    await crud.add_products(
        session,
        [models.Product(name=name, price=price) for name, price in SEED_PRODUCTS],
    )

# -*- coding: utf-8 -*-
"""Async engine, session factory and declarative base."""
import logging
import os
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./checkout.db")

engine = create_async_engine(DATABASE_URL, echo=False)
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """Base class for every table of the checkout service."""


async def get_db():
    """FastAPI dependency: one session per request."""
    async with SessionLocal() as session:
        yield session

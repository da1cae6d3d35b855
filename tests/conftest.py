"""Test fixtures for the link shortener service."""

import random
from typing import Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from shortlinks.main import create_app
from shortlinks.repositories.memory_repository import MemoryLinkStore
from shortlinks.repositories.sql_repository import SQLLinkStore
from shortlinks.services.codes import CodeGenerator
from shortlinks.services.shortener import ShortenerService

# Test database URL - using SQLite in-memory
TEST_SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

BASE_URL = "https://sho.rt"


@pytest.fixture
def memory_store() -> MemoryLinkStore:
    return MemoryLinkStore()


@pytest_asyncio.fixture
async def sql_store():
    """SQL link store over an in-memory SQLite database."""
    engine = create_async_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    store = SQLLinkStore(engine)
    await store.initialize()
    
    yield store
    
    await store.close()


@pytest.fixture
def code_generator() -> CodeGenerator:
    return CodeGenerator(random_source=random.Random(1234))


@pytest.fixture
def shortener_service(memory_store, code_generator) -> ShortenerService:
    return ShortenerService(
        link_store=memory_store,
        code_generator=code_generator,
        base_url=BASE_URL,
        max_attempts=5,
    )


@pytest.fixture
def test_app(memory_store) -> FastAPI:
    """FastAPI app serving from a fresh memory store."""
    return create_app(link_store=memory_store)


@pytest.fixture
def client(test_app) -> Generator[TestClient, None, None]:
    """Return FastAPI TestClient instance."""
    with TestClient(test_app) as test_client:
        yield test_client

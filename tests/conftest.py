"""
Shared fixtures: a fresh database with every ORM table created.

Persistence tests run on in-memory SQLite. When TEST_DATABASE_URL points at
a PostgreSQL database they run a second time against it; its upload tables
are created before and dropped after every test.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import db.models  # noqa: F401  registers all ORM models on Base.metadata
from db.base import Base
from db.config import normalize_postgres_url
from db.session import build_session_factory

TEST_DATABASE_URL_ENV = "TEST_DATABASE_URL"


def _sqlite_engine() -> Engine:
    return create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def _postgres_engine() -> Engine:
    url = os.getenv(TEST_DATABASE_URL_ENV, "").strip()
    if not url:
        pytest.skip(f"{TEST_DATABASE_URL_ENV} is not set")
    return create_engine(normalize_postgres_url(url), pool_pre_ping=True)


@pytest.fixture()
def postgres_engine() -> Iterator[Engine]:
    engine = _postgres_engine()
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture(params=["sqlite", "postgresql"])
def engine(request: pytest.FixtureRequest) -> Iterator[Engine]:
    engine = _sqlite_engine() if request.param == "sqlite" else _postgres_engine()
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return build_session_factory(engine)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()

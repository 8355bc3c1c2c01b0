"""
tests/test_postgres_concurrency.py

Concurrent uploads against a real PostgreSQL database. Skipped unless
TEST_DATABASE_URL is set.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.domain.uploads import Uploader
from app.services.dimension_upsert import AccountUpserter
from app.services.upload_ingestion_service import UploadIngestionService
from db.models import Account, UploadBatch, UploadKind
from db.session import build_session_factory

UPLOADER = Uploader(subject="user-123", email="planner@example.com")


@pytest.fixture()
def pg_sessions(postgres_engine: Engine) -> sessionmaker[Session]:
    return build_session_factory(postgres_engine)


def _budget_csv(call_points: list[str]) -> bytes:
    lines = ["Call Point,PPG - Item,Total Cases Budgeted"]
    lines.extend(f"{call_point},Cola,10" for call_point in call_points)
    return ("\n".join(lines) + "\n").encode("utf-8")


def _account_count(factory: sessionmaker[Session]) -> int:
    with factory() as db:
        return db.scalar(select(func.count()).select_from(Account)) or 0


def test_overlapping_writer_creates_only_new_accounts(pg_sessions: sessionmaker[Session]) -> None:
    def _second() -> int:
        with pg_sessions() as second:
            created = AccountUpserter(second).upsert(["Publix", "Kroger", "Safeway"])
            second.commit()
            return created

    first = pg_sessions()
    try:
        assert AccountUpserter(first).upsert(["Kroger", "Publix"]) == 2

        with ThreadPoolExecutor(max_workers=1) as pool:
            pending = pool.submit(_second)
            first.commit()
            created = pending.result(timeout=30)
    finally:
        first.close()

    assert created == 1
    assert _account_count(pg_sessions) == 3


def test_batches_with_overlapping_accounts_in_opposite_order_both_process(
    pg_sessions: sessionmaker[Session],
) -> None:
    call_points = [f"Account {index:03d}" for index in range(200)]
    service = UploadIngestionService(insert_batch_size=10, log_row_errors=False)
    barrier = threading.Barrier(2)

    def _ingest(keys: list[str]):
        with pg_sessions() as db:
            barrier.wait(timeout=30)
            return service.ingest_upload(
                db=db,
                kind=UploadKind.BUDGET,
                file_name="budget.csv",
                content=_budget_csv(keys),
                uploader=UPLOADER,
            )

    with ThreadPoolExecutor(max_workers=2) as pool:
        forward = pool.submit(_ingest, call_points)
        backward = pool.submit(_ingest, list(reversed(call_points)))
        outcomes = [forward.result(timeout=60), backward.result(timeout=60)]

    assert [outcome.status for outcome in outcomes] == ["processed", "processed"]
    assert [outcome.error for outcome in outcomes] == [None, None]
    assert sum(outcome.accounts_created for outcome in outcomes) == len(call_points)
    assert _account_count(pg_sessions) == len(call_points)

    with pg_sessions() as db:
        statuses = db.scalars(select(UploadBatch.status)).all()
    assert sorted(statuses) == ["processed", "processed"]

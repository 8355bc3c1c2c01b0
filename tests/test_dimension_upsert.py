from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from app.domain.uploads import SKIPPED_ROW, BatchAccumulator, RowError, RowMapResult
from app.repositories.account_repository import AccountRepository
from app.services.dimension_upsert import AccountUpserter


def _account_count(db: Session) -> int:
    return AccountRepository(db).count()


class TestAccountUpserter:
    def test_dedupes_within_batch_and_ignores_blank(self, db_session: Session) -> None:
        upserter = AccountUpserter(db_session, batch_size=2)

        created = upserter.upsert(["Publix", " Publix ", "", "Kroger", "Safeway"])
        db_session.commit()

        assert created == 3
        assert upserter.seen_keys == frozenset({"Publix", "Kroger", "Safeway"})
        assert _account_count(db_session) == 3

    def test_seen_keys_are_not_resent(self, db_session: Session) -> None:
        upserter = AccountUpserter(db_session)

        assert upserter.upsert(["Publix"]) == 1
        assert upserter.upsert(["Publix"]) == 0

    def test_existing_key_is_a_no_op(self, db_session: Session) -> None:
        AccountUpserter(db_session).upsert(["Publix - Atlanta Division"])
        db_session.commit()

        created = AccountUpserter(db_session).upsert(["Publix - Atlanta Division", "Kroger"])
        db_session.commit()

        assert created == 1
        assert _account_count(db_session) == 2
        account = AccountRepository(db_session).get_by_external_key("Publix - Atlanta Division")
        assert account is not None
        assert account.name is None

    def test_keys_reach_the_database_in_sorted_order(
        self,
        db_session: Session,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        sent: list[list[str]] = []
        original = AccountRepository.insert_missing

        def _recording_insert(self, external_keys, *, batch_size=500):
            sent.append(list(external_keys))
            return original(self, external_keys, batch_size=batch_size)

        monkeypatch.setattr(AccountRepository, "insert_missing", _recording_insert)

        upserter = AccountUpserter(db_session, batch_size=2)
        upserter.upsert(["Safeway", "Kroger", "Publix", "Kroger", "Albertsons"])
        upserter.upsert(["Winn-Dixie", "Aldi", "Publix"])

        assert sent == [
            ["Albertsons", "Kroger", "Publix", "Safeway"],
            ["Aldi", "Winn-Dixie"],
        ]


class TestBatchAccumulator:
    def test_skipped_rows_are_counted_but_contribute_nothing(self) -> None:
        accumulator = BatchAccumulator()

        accumulator.add(SKIPPED_ROW)
        accumulator.add(
            RowMapResult(
                dimension_keys=("Publix",),
                errors=(RowError(row_number=3, message="Negative volume not allowed"),),
            )
        )
        accumulator.add(RowMapResult(dimension_keys=("Kroger", "Publix")))

        assert accumulator.rows_seen == 3
        assert accumulator.rows_skipped == 1
        assert accumulator.row_count == 0
        assert accumulator.error_count == 1
        assert accumulator.account_keys == ["Publix", "Kroger"]

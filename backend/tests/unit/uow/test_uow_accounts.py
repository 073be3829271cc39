"""
Unit tests for the read-write and read-only units of work over accounts.
"""

from __future__ import annotations

import pytest
from folio.models import Account
from folio.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

from tests.factories.account import AccountFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN an account is added inside the context and it exits cleanly
        THEN the row is visible afterwards.
        """
        initial = db.session.query(Account).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.accounts.add(AccountFactory.build())

        assert db.session.query(Account).count() == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, app, db, session):
        initial = db.session.query(Account).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.accounts.add(AccountFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(Account).count() == initial


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_allows_reads(self, app, db, session):
        account = AccountFactory()
        session.commit()
        account_id = account.id

        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            assert uow.accounts.get(account_id) is not None
            assert uow.accounts.exists_by_login_id(account.login_id)

    def test_blocks_orm_flush_writes(self, app, db, session):
        pending = AccountFactory.build()

        with SQLAlchemyReadOnlyUnitOfWork() as uow, pytest.raises(RuntimeError, match="flush"):
            uow.session.add(pending)
            uow.session.flush()

        if pending in session:
            session.expunge(pending)

    def test_disallows_commit(self, app, db, session):
        with SQLAlchemyReadOnlyUnitOfWork() as uow, pytest.raises(
            RuntimeError, match="does not allow commit"
        ):
            uow.commit()

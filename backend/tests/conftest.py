"""Shared fixtures: the app, a rolled-back database session per test, token
services and factory wiring.
"""

from __future__ import annotations

import os
from datetime import timedelta

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from folio.core.config import TestingConfig
from folio.core.extensions import db as _db  # Flask-SQLAlchemy instance
from folio.factory import create_app  # application factory under test
from folio.infra.jwt.credential_codec import JWTCredentialCodec
from folio.services.auth.dto import AuthTokenConfig
from folio.services.auth.service import AuthService
from folio.services.auth.tokens import TokenIssuer

TEST_SECRET = TestingConfig.JWT_SECRET_KEY


class TestConfig(TestingConfig):
    """In-memory SQLite with quieter logs."""

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    # DATABASE_URL from the shell must not win over the test database
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Tables exist for the whole run."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    # In-memory SQLite lives only as long as this connection
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Session joined to an outer transaction that is rolled back after the test.

    A SAVEPOINT is reopened each time the previous one ends.
    ``session.commit()`` inside a test only releases that SAVEPOINT: the rows
    stay visible to later requests of the same test and vanish at teardown.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _reopen_savepoint(sess, trans):
        nonlocal nested
        if trans.nested and not trans._parent.nested:
            nested = connection.begin_nested()

    # Units of work and request teardown go through db.session
    flask_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = flask_session
        top_trans.rollback()


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Seeded Faker."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def codec() -> JWTCredentialCodec:
    return JWTCredentialCodec(secret=TEST_SECRET)


@pytest.fixture()
def issuer(codec) -> TokenIssuer:
    return TokenIssuer(codec, AuthTokenConfig())


@pytest.fixture()
def auth_service(issuer) -> AuthService:
    return AuthService(issuer=issuer)


@pytest.fixture()
def expired_issuer(codec) -> TokenIssuer:
    """Issuer whose tokens are already expired when minted."""
    return TokenIssuer(
        codec,
        AuthTokenConfig(
            access_expires=timedelta(seconds=-30),
            refresh_expires=timedelta(seconds=-30),
        ),
    )


@pytest.fixture(autouse=True)
def _bind_factories(session):
    """Factories persist through the per-test session."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield

"""factory_boy base bound to the per-test SQLAlchemy session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Registry for the session the ``session`` fixture yields."""

    _current = None

    @classmethod
    def set(cls, session):
        cls._current = session

    @classmethod
    def get(cls):
        if cls._current is None:
            raise RuntimeError("No test session bound; request the 'session' fixture.")
        return cls._current


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        # Resolved per build, the session changes every test
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"

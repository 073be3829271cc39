"""Factory Boy definition for :class:`folio.models.account.Account`."""

from __future__ import annotations

import factory
from folio.models.account import Account, AccountRole

from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!long"


class AccountFactory(BaseFactory):
    """Build persisted :class:`folio.models.account.Account` instances.

    The raw password defaults to :data:`DEFAULT_PASSWORD`; pass
    ``password="..."`` to choose another one.
    """

    class Meta:
        model = Account

    id = None  # let autoincrement handle it
    login_id = factory.Sequence(lambda n: f"member{n}")
    email = factory.Sequence(lambda n: f"member{n}@example.com")
    nickname = factory.Faker("first_name")
    role = AccountRole.USER
    bio = factory.LazyAttribute(lambda o: f"{o.nickname}'s profile")
    image_url = None
    refresh_token = None
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password using model setter (ensures hashing)."""
        obj.password = extracted or DEFAULT_PASSWORD


class AdminFactory(AccountFactory):
    role = AccountRole.ADMIN

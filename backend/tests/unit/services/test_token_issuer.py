# tests/unit/services/test_token_issuer.py
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from folio.models.account import AccountRole
from folio.services._shared.ports.credential_codec import ExpiredCredential, MalformedCredential
from folio.services.auth.dto import AuthTokenConfig
from folio.services.auth.tokens import TokenIssuer
from freezegun import freeze_time

from tests.factories.account import AccountFactory, AdminFactory


class TestTokenIssuer:
    def test_access_token_carries_identity_claims(self, issuer, codec, session):
        account = AdminFactory(nickname="Ada")
        session.flush()

        payload = codec.decode(issuer.issue_access(account))

        assert payload["accountId"] == account.id
        assert payload["email"] == account.email
        assert payload["displayName"] == "Ada"
        assert payload["role"] == AccountRole.ADMIN.value
        assert {"jti", "iat", "exp"} <= payload.keys()

    def test_refresh_token_omits_profile_claims(self, issuer, codec, session):
        account = AccountFactory()
        session.flush()

        payload = codec.decode(issuer.issue_refresh(account))

        assert payload["accountId"] == account.id
        assert "displayName" not in payload
        assert "role" not in payload

    def test_tokens_minted_in_the_same_second_differ(self, issuer, session):
        account = AccountFactory()
        session.flush()

        with freeze_time("2025-03-01 12:00:00"):
            first = issuer.issue_refresh(account)
            second = issuer.issue_refresh(account)

        assert first != second

    def test_lifetimes_follow_the_config(self, codec, session):
        account = AccountFactory()
        session.flush()
        issuer = TokenIssuer(
            codec,
            AuthTokenConfig(access_expires=timedelta(minutes=15), refresh_expires=timedelta(days=2)),
        )

        with freeze_time("2025-03-01 12:00:00"):
            access = issuer.decode(issuer.issue_access(account))
            refresh = issuer.decode(issuer.issue_refresh(account))

        issued = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
        assert access.issued_at == issued
        assert access.expires_at == issued + timedelta(minutes=15)
        assert refresh.expires_at == issued + timedelta(days=2)
        assert refresh.role is None

    def test_decode_returns_claim_set(self, issuer, session):
        account = AccountFactory()
        session.flush()

        claims = issuer.decode(issuer.issue_access(account))

        assert claims.account_id == account.id
        assert claims.role == "USER"
        assert claims.is_admin is False

    def test_decode_propagates_expiry(self, expired_issuer, session):
        account = AccountFactory()
        session.flush()

        with pytest.raises(ExpiredCredential):
            expired_issuer.decode(expired_issuer.issue_access(account))

    def test_decode_rejects_tokens_without_account_id(self, issuer, codec):
        token = codec.encode({"email": "x@example.com"}, timedelta(minutes=1))

        with pytest.raises(MalformedCredential):
            issuer.decode(token)

    def test_payload_and_validate_swallow_failures(self, issuer, expired_issuer, session):
        account = AccountFactory()
        session.flush()
        expired = expired_issuer.issue_access(account)

        assert issuer.payload(expired) is None
        assert issuer.payload("garbage") is None
        assert issuer.validate(expired) is False
        assert issuer.validate(issuer.issue_access(account)) is True

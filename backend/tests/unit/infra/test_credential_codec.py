# tests/unit/infra/test_credential_codec.py
from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from folio.core.config import TestingConfig
from folio.infra.jwt.credential_codec import JWTCredentialCodec
from folio.services._shared.ports.credential_codec import (
    CredentialError,
    ExpiredCredential,
    InvalidSignature,
    MalformedCredential,
)

TEST_SECRET = TestingConfig.JWT_SECRET_KEY
OTHER_SECRET = "another-secret-key-that-is-also-long-enough-42"


class TestJWTCredentialCodec:
    def test_round_trip_preserves_claims(self, codec):
        token = codec.encode({"accountId": 7, "email": "a@example.com"}, timedelta(minutes=5))

        claims = codec.decode(token)

        assert claims["accountId"] == 7
        assert claims["email"] == "a@example.com"
        assert claims["exp"] - claims["iat"] == 300

    def test_expired_token_is_reported_as_expired(self, codec):
        token = codec.encode({"accountId": 1}, timedelta(seconds=-10))

        with pytest.raises(ExpiredCredential):
            codec.decode(token)

    def test_token_from_another_secret_has_invalid_signature(self, codec):
        foreign = JWTCredentialCodec(secret=OTHER_SECRET)
        token = foreign.encode({"accountId": 1}, timedelta(minutes=5))

        with pytest.raises(InvalidSignature):
            codec.decode(token)

    @pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
    def test_garbage_is_malformed(self, codec, garbage):
        with pytest.raises(MalformedCredential):
            codec.decode(garbage)

    def test_missing_exp_is_malformed(self, codec):
        token = jwt.encode({"accountId": 1, "iat": 1_700_000_000}, TEST_SECRET, algorithm="HS256")

        with pytest.raises(MalformedCredential):
            codec.decode(token)

    def test_every_failure_shares_a_base_class(self, codec):
        with pytest.raises(CredentialError):
            codec.decode("nope")

    def test_rejects_empty_secret_and_asymmetric_algorithms(self):
        with pytest.raises(ValueError):
            JWTCredentialCodec(secret="")
        with pytest.raises(ValueError):
            JWTCredentialCodec(secret=TEST_SECRET, algorithm="RS256")

    def test_secret_is_not_in_repr(self, codec):
        assert TEST_SECRET not in repr(codec)

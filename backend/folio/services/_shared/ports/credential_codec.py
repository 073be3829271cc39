from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Protocol


class CredentialError(Exception):
    """Base class for every reason a credential fails to decode."""


class InvalidSignature(CredentialError):
    """The signature does not match the configured secret."""


class ExpiredCredential(CredentialError):
    """The signature is valid but ``exp`` lies in the past."""


class MalformedCredential(CredentialError):
    """The input is not a structurally valid credential."""


class CredentialCodec(Protocol):
    """Port for signing and verifying time-bounded claim sets."""

    def encode(self, claims: Mapping[str, Any], expires_in: timedelta) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...

"""
folio.services._shared.ports
============================

*Ports* (hexagonal interfaces) the authentication services depend on.

Modules
-------
- :mod:`credential_codec`:
    Defines :class:`~.CredentialCodec`, the signing/verification contract.

- :mod:`identity_store`:
    Defines :class:`~.IdentityStore`, account lookup plus the single
    refresh-token slot.

Concrete adapters live under ``folio.infra`` (codec) and
``folio.repositories`` (identity store).
"""

from __future__ import annotations

from .credential_codec import CredentialCodec
from .identity_store import IdentityStore

__all__ = ["CredentialCodec", "IdentityStore"]

from folio.models.account import Account, AccountRole

__all__ = ["Account", "AccountRole"]

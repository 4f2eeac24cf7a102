"""
AccountDirectory — non-secret account metadata.

Accounts are kept in insertion order under the ``accounts`` key of the
settings document. The list is parsed once by ``load()`` and written back
in full by ``flush()`` after every mutation.
"""
import logging
from typing import Optional
from datetime import datetime

from pydantic import ValidationError

from .conf import ACCOUNTS_KEY
from .models import Account, as_utc, utcnow
from .store import DocumentStore

logger = logging.getLogger("nebula.directory")


class AccountDirectory:
    """In-memory cache of Account metadata over a DocumentStore."""

    def __init__(self, store: DocumentStore):
        self._store = store
        self._accounts: dict[str, Account] = {}
        self.load()

    def load(self) -> None:
        """Parse the persisted account list into the cache.

        Entries that fail validation are logged and skipped.
        """
        self._accounts = {}
        for entry in self._store.get(ACCOUNTS_KEY, []) or []:
            try:
                account = Account.model_validate(entry)
            except ValidationError as err:
                logger.error("Skipping invalid account entry: %s", err)
                continue
            self._accounts[account.id] = account
        logger.debug("Loaded %d account(s)", len(self._accounts))

    def flush(self) -> None:
        self._store.set(
            ACCOUNTS_KEY, [account.to_document() for account in self._accounts.values()]
        )

    def list(self) -> list[Account]:
        return [account.model_copy() for account in self._accounts.values()]

    def get(self, account_id: str) -> Optional[Account]:
        account = self._accounts.get(account_id)
        return account.model_copy() if account else None

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def upsert(self, account: Account) -> Account:
        """Insert a new account or merge into an existing one.

        On merge only the fields the incoming account sets explicitly are
        taken from it. ``created_at`` is always kept, and ``last_used_at``
        is never cleared.

        Returns:
            The stored account.
        """
        existing = self._accounts.get(account.id)
        if existing is None:
            stored = account.model_copy()
            logger.info("Added account %s", account.id)
        else:
            update = {
                field: getattr(account, field)
                for field in account.model_fields_set - {"id", "created_at"}
            }
            if not update.get("display_name"):
                update.pop("display_name", None)
            if update.get("last_used_at") is None:
                update.pop("last_used_at", None)
            stored = existing.model_copy(update=update)
            logger.info("Updated account %s", account.id)
        self._accounts[account.id] = stored
        self.flush()
        return stored.model_copy()

    def remove(self, account_id: str) -> bool:
        """Remove an account; returns False if it was not present."""
        if self._accounts.pop(account_id, None) is None:
            return False
        self.flush()
        logger.info("Removed account %s", account_id)
        return True

    def touch_last_used(self, account_id: str, when: Optional[datetime] = None) -> Optional[Account]:
        account = self._accounts.get(account_id)
        if account is None:
            return None
        account.last_used_at = as_utc(when) or utcnow()
        self.flush()
        return account.model_copy()

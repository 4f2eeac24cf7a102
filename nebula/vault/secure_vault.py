"""
SecureVault — Session cookies kept in the OS credential store.

Provides the public API for the secret side of an account:
- ``store(account_id, record)`` — serialize and persist a SecretRecord
- ``retrieve(account_id)`` — return the SecretRecord, or None when absent
- ``delete(account_id)`` — remove the entry; missing entries are fine

Entries are addressed by a fixed service namespace plus the account id.
The backend is whatever ``keyring`` resolves for the platform (Windows
Credential Locker, macOS Keychain, Secret Service) unless one is injected.

Security Note:
    Never log cookie values or payloads. Only log account ids and operations.
"""
import logging
from typing import Optional

import keyring
from keyring.backend import KeyringBackend
from keyring.errors import KeyringError, NoKeyringError, PasswordDeleteError

from ..conf import VAULT_SERVICE_NAME
from ..exceptions import IncompleteAccountData, VaultReadError, VaultUnavailable
from ..models import SecretRecord
from .serialization import serialize_record, deserialize_record

logger = logging.getLogger("nebula.vault")


class SecureVault:
    """Account-id keyed SecretRecord storage on top of ``keyring``."""

    def __init__(
        self,
        service: str = VAULT_SERVICE_NAME,
        backend: Optional[KeyringBackend] = None,
    ):
        self._service = service
        self._backend = backend

    @property
    def service(self) -> str:
        return self._service

    @property
    def backend(self) -> KeyringBackend:
        if self._backend is None:
            self._backend = keyring.get_keyring()
        return self._backend

    def _validate_key(self, account_id: str) -> None:
        if not account_id:
            raise ValueError("Vault key cannot be empty")

    async def store(self, account_id: str, record: SecretRecord) -> None:
        """Persist a SecretRecord, replacing any previous one.

        Args:
            account_id: Owning account.
            record: Secret record; ``ssid`` is mandatory.

        Raises:
            IncompleteAccountData: If the record has no session id or
                belongs to another account.
            VaultUnavailable: If the credential store rejects the write.
        """
        self._validate_key(account_id)
        if not record.ssid:
            raise IncompleteAccountData(
                f"Secret record for {account_id} has no session id"
            )
        if record.account_id != account_id:
            raise IncompleteAccountData(
                f"Secret record belongs to {record.account_id}, not {account_id}"
            )
        payload = serialize_record(record)
        try:
            self.backend.set_password(self._service, account_id, payload)
        except (KeyringError, OSError) as err:
            logger.error("Vault store failed: account=%s: %s", account_id, err)
            raise VaultUnavailable(
                f"Failed to securely store account credentials: {err}"
            ) from err
        logger.debug("Vault store: account=%s", account_id)

    async def retrieve(self, account_id: str) -> Optional[SecretRecord]:
        """Return the stored SecretRecord.

        A missing entry, or a credential store that cannot be reached, both
        read as absent.

        Args:
            account_id: Owning account.

        Returns:
            SecretRecord, or None if absent.

        Raises:
            VaultReadError: If the stored payload is corrupt or names
                another account.
        """
        self._validate_key(account_id)
        try:
            payload = self.backend.get_password(self._service, account_id)
        except NoKeyringError as err:
            logger.warning(
                "Vault backend unavailable reading account=%s: %s", account_id, err
            )
            return None
        except (KeyringError, OSError) as err:
            logger.error("Vault read failed: account=%s: %s", account_id, err)
            raise VaultReadError(
                f"Failed to retrieve account credentials: {err}"
            ) from err
        if payload is None:
            return None
        record = deserialize_record(payload)
        if record.account_id != account_id:
            raise VaultReadError(
                f"Stored secret for {account_id} names account {record.account_id}"
            )
        return record

    async def delete(self, account_id: str) -> None:
        """Remove the stored SecretRecord; a missing entry is a no-op.

        Raises:
            VaultUnavailable: If the credential store rejects the delete.
        """
        self._validate_key(account_id)
        try:
            self.backend.delete_password(self._service, account_id)
        except PasswordDeleteError:
            logger.debug("Vault delete: account=%s had no entry", account_id)
            return
        except (KeyringError, OSError) as err:
            logger.error("Vault delete failed: account=%s: %s", account_id, err)
            raise VaultUnavailable(
                f"Failed to delete account credentials: {err}"
            ) from err
        logger.debug("Vault delete: account=%s", account_id)

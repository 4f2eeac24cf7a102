"""
Tests for SecureVault and the keyring payload format.
"""
import orjson
import pytest

from nebula.exceptions import IncompleteAccountData, VaultReadError, VaultUnavailable
from nebula.models import SecretRecord
from nebula.vault import SecureVault, serialize_record, deserialize_record

from conftest import BrokenKeyring


@pytest.fixture
def record():
    return SecretRecord(account_id="abc123", ssid="S1", sub="abc123", tdid="T1")


class TestSerialization:
    """Tests for the flat payload stored in the keyring."""

    def test_payload_is_flat_string_map(self, record):
        """Test the payload is a flat JSON object without unset cookies."""
        payload = orjson.loads(serialize_record(record))
        assert payload == {"accountId": "abc123", "ssid": "S1", "sub": "abc123", "tdid": "T1"}

    def test_deserialize(self, record):
        """Test a payload reads back into the same record."""
        assert deserialize_record(serialize_record(record)) == record

    @pytest.mark.parametrize("payload", [
        "not json",
        "[1, 2]",
        '{"accountId": "abc123", "ssid": 5}',
        '{"ssid": "S1"}',
    ])
    def test_corrupt_payload(self, payload):
        """Test unusable payloads raise VaultReadError."""
        with pytest.raises(VaultReadError):
            deserialize_record(payload)


class TestSecureVault:
    """Tests for store/retrieve/delete."""

    @pytest.mark.asyncio
    async def test_store_and_retrieve(self, vault, keyring_backend, record):
        """Test a stored record is keyed by service and account id."""
        await vault.store("abc123", record)
        assert ("NebulaTest", "abc123") in keyring_backend.entries
        assert await vault.retrieve("abc123") == record

    @pytest.mark.asyncio
    async def test_store_overwrites(self, vault, record):
        """Test storing again replaces the previous record."""
        await vault.store("abc123", record)
        newer = record.model_copy(update={"ssid": "S2"})
        await vault.store("abc123", newer)
        assert (await vault.retrieve("abc123")).ssid == "S2"

    @pytest.mark.asyncio
    async def test_retrieve_missing_is_none(self, vault):
        """Test a missing entry reads as absent, not an error."""
        assert await vault.retrieve("nobody") is None

    @pytest.mark.asyncio
    async def test_delete(self, vault, record):
        """Test delete removes the entry."""
        await vault.store("abc123", record)
        await vault.delete("abc123")
        assert await vault.retrieve("abc123") is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, vault):
        """Test deleting a missing entry succeeds."""
        await vault.delete("nobody")

    @pytest.mark.asyncio
    async def test_store_requires_ssid(self, vault):
        """Test a record without a session id is rejected."""
        with pytest.raises(IncompleteAccountData):
            await vault.store("abc123", SecretRecord(account_id="abc123", sub="abc123"))

    @pytest.mark.asyncio
    async def test_store_rejects_foreign_record(self, vault, record):
        """Test a record owned by another account is rejected."""
        with pytest.raises(IncompleteAccountData):
            await vault.store("someone-else", record)

    @pytest.mark.asyncio
    async def test_retrieve_detects_mismatched_owner(self, vault, keyring_backend, record):
        """Test a payload naming another account raises VaultReadError."""
        keyring_backend.entries[("NebulaTest", "other")] = serialize_record(record)
        with pytest.raises(VaultReadError):
            await vault.retrieve("other")

    @pytest.mark.asyncio
    async def test_empty_key_rejected(self, vault):
        """Test empty account ids are refused."""
        with pytest.raises(ValueError):
            await vault.retrieve("")


class TestUnavailableBackend:
    """Tests for a credential store that cannot be used."""

    @pytest.mark.asyncio
    async def test_store_raises_unavailable(self, record):
        """Test write failures surface as VaultUnavailable."""
        vault = SecureVault("NebulaTest", backend=BrokenKeyring())
        with pytest.raises(VaultUnavailable):
            await vault.store("abc123", record)

    @pytest.mark.asyncio
    async def test_retrieve_reads_as_absent(self):
        """Test a missing backend reads as absent."""
        vault = SecureVault("NebulaTest", backend=BrokenKeyring())
        assert await vault.retrieve("abc123") is None

    @pytest.mark.asyncio
    async def test_delete_raises_unavailable(self):
        """Test delete failures other than not-found surface."""
        vault = SecureVault("NebulaTest", backend=BrokenKeyring())
        with pytest.raises(VaultUnavailable):
            await vault.delete("abc123")

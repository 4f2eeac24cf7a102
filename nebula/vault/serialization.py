"""
Vault Serialization — SecretRecord to keyring payload and back.

A record is stored as a flat JSON object of string values, keyed by the
camelCase field names (``accountId``, ``ssid``, ``sub``, ...).

Security Note:
    Never log the payload. Error messages only mention structure, not values.
"""
import logging

import orjson
from pydantic import ValidationError

from ..exceptions import VaultReadError
from ..models import SecretRecord

logger = logging.getLogger("nebula.vault")


def serialize_record(record: SecretRecord) -> str:
    """Serialize a SecretRecord into the flat keyring payload.

    Unset cookies are left out of the payload.

    Args:
        record: Secret record to serialize.

    Returns:
        JSON text.
    """
    flat = record.model_dump(by_alias=True, exclude_none=True)
    return orjson.dumps(flat).decode("utf-8")


def deserialize_record(payload: str) -> SecretRecord:
    """Deserialize a keyring payload back to a SecretRecord.

    Args:
        payload: JSON text from serialize_record.

    Returns:
        The stored SecretRecord.

    Raises:
        VaultReadError: If the payload is not a flat map of strings.
    """
    try:
        parsed = orjson.loads(payload)
    except orjson.JSONDecodeError as err:
        raise VaultReadError("Stored secret is not valid JSON") from err
    if not isinstance(parsed, dict):
        raise VaultReadError("Stored secret is not a key/value map")
    if not all(isinstance(v, str) for v in parsed.values()):
        raise VaultReadError("Stored secret contains non-string values")
    try:
        return SecretRecord.model_validate(parsed)
    except ValidationError as err:
        raise VaultReadError(
            f"Stored secret is missing fields: {err.error_count()} error(s)"
        ) from err

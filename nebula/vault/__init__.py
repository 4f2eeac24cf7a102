"""Secure Vault — Riot session cookies held in the OS credential store.

Security Note (Threat Model):
    Cookies are decrypted by the OS credential store on read and live in
    process memory while a launch writes them to the Riot Client's own
    settings file. That file is plaintext on disk by the Riot Client's
    design; protecting it is out of scope.
"""

from .secure_vault import SecureVault
from .serialization import serialize_record, deserialize_record

__all__ = [
    "SecureVault",
    "serialize_record",
    "deserialize_record",
]

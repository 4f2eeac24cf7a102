"""
Username/password sign-in.

Only the interface is real. ``PlaceholderAuthenticator`` does not talk to
Riot: it fabricates a session so the rest of the account flow can be
exercised. A real implementation must return a SecretRecord whose ``sub``
is the account's PUUID, or raise ``MfaRequired`` when Riot asks for a code.
"""
import uuid
import logging
from typing import Protocol

from .exceptions import AuthenticationError
from .models import SecretRecord

logger = logging.getLogger("nebula.auth")


class Authenticator(Protocol):

    async def authenticate(self, username: str, password: str) -> SecretRecord:
        """Exchange credentials for session cookies.

        Raises:
            MfaRequired: If the account needs a second factor.
            AuthenticationError: If the credentials are rejected.
        """
        ...


class PlaceholderAuthenticator:
    """Simulated sign-in returning random ``simulated_*`` cookies."""

    async def authenticate(self, username: str, password: str) -> SecretRecord:
        if not username or not password:
            raise AuthenticationError("Username and password are required.")
        logger.warning(
            "Using placeholder authentication for %s, no Riot sign-in is performed",
            username,
        )
        sub = f"simulated_sub_{uuid.uuid4()}"
        return SecretRecord(
            account_id=sub,
            sub=sub,
            ssid=f"simulated_ssid_{uuid.uuid4()}",
            clid=f"simulated_clid_{uuid.uuid4()}",
            csid=f"simulated_csid_{uuid.uuid4()}",
            tdid=f"simulated_tdid_{uuid.uuid4()}",
        )

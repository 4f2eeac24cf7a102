"""
SessionImporter — turn the Riot Client's logged-in session into an account.

The private settings file does not carry a readable name, so imported
accounts get a placeholder built from the start of the owner id.
"""
import logging
from pathlib import Path
from typing import Union

from ..conf import DEFAULT_REGION, SUB_COOKIE
from ..exceptions import NoActiveSession
from ..models import Account, ImportedSession, SecretRecord
from . import codec
from .paths import resolve_client_paths

logger = logging.getLogger("nebula.session")


def imported_display_name(owner_id: str) -> str:
    return f"Imported ({owner_id[:5]})"


class SessionImporter:
    """Reads the live session of the Riot Client installed under ``data_root``."""

    def __init__(self, data_root: Union[str, Path]):
        self._data_root = Path(data_root)

    async def import_current_session(self) -> ImportedSession:
        """Read the current session.

        Returns:
            ImportedSession with a new Account and its SecretRecord.

        Raises:
            DataDirNotFound: If no Riot Client data directory exists.
            NoActiveSession: If the session file is missing, unreadable, or
                holds no usable cookies.
        """
        paths = resolve_client_paths(self._data_root)
        try:
            raw = paths.private_settings.read_text(encoding="utf-8")
        except FileNotFoundError as err:
            logger.info(
                "Private settings not found at %s, assuming not logged in",
                paths.private_settings,
            )
            raise NoActiveSession() from err
        except (OSError, UnicodeDecodeError) as err:
            logger.error("Cannot read %s: %s", paths.private_settings, err)
            raise NoActiveSession(
                f"Failed to read Riot private settings: {err}"
            ) from err

        cookies = codec.decode(raw)
        if cookies is None:
            raise NoActiveSession(
                "Could not extract necessary cookies (ssid, sub) from Riot settings."
            )

        secret = SecretRecord.from_cookies(cookies)
        owner_id = cookies[SUB_COOKIE]
        account = Account(
            id=owner_id,
            display_name=imported_display_name(owner_id),
            region=DEFAULT_REGION,
        )
        logger.info("Imported session for account %s", owner_id)
        return ImportedSession(account=account, secret=secret)

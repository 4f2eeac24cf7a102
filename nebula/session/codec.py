"""
Session File Codec — RiotGamesPrivateSettings.yaml / RiotClientSettings.yaml.

The Riot Client reads its login cookies from::

    private:
      riot-login:
        persist:
          session:
            cookies:
              - {domain, hostOnly, httpOnly, name, path, persistent, secureOnly, value}

and refuses the session unless all five cookies below are present, so the
schema is fixed here instead of being inferred from whatever file exists.
"""
import logging
from typing import Mapping, Optional

import yaml

from ..conf import COOKIE_DOMAIN, PATCHLINE, SSID_COOKIE, SUB_COOKIE, DEFAULT_REGION, DEFAULT_LOCALE

logger = logging.getLogger("nebula.session")

COOKIES_PATH = ("private", "riot-login", "persist", "session", "cookies")

# (name, httpOnly) in the order the Riot Client writes them
COOKIE_SCHEMA = (
    ("tdid", True),
    (SSID_COOKIE, True),
    ("clid", True),
    (SUB_COOKIE, False),
    ("csid", True),
)


def _cookie_entry(name: str, http_only: bool, value: str) -> dict:
    return {
        "domain": COOKIE_DOMAIN,
        "hostOnly": True,
        "httpOnly": http_only,
        "name": name,
        "path": "/",
        "persistent": True,
        "secureOnly": True,
        "value": value,
    }


def _dump(document: dict) -> str:
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)


def decode(raw: str) -> Optional[dict[str, str]]:
    """Extract session cookies from private settings YAML.

    Args:
        raw: Text of RiotGamesPrivateSettings.yaml.

    Returns:
        Mapping of cookie name to value, or None when the file holds no
        usable session (no cookie list, or ``ssid``/``sub`` missing).
    """
    try:
        node = yaml.safe_load(raw) if raw else None
    except yaml.YAMLError as err:
        logger.warning("Private settings are not valid YAML: %s", err)
        return None
    for key in COOKIES_PATH:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    if not isinstance(node, list):
        return None

    cookies: dict[str, str] = {}
    for entry in node:
        if not isinstance(entry, dict):
            continue
        name, value = entry.get("name"), entry.get("value")
        if name and value:
            cookies[str(name)] = str(value)

    if cookies.get(SSID_COOKIE) and cookies.get(SUB_COOKIE):
        return cookies
    return None


def encode_private_settings(cookies: Mapping[str, str]) -> str:
    """Render RiotGamesPrivateSettings.yaml for the given cookies.

    Missing cookies are written with an empty value, never omitted.
    """
    entries = [
        _cookie_entry(name, http_only, cookies.get(name) or "")
        for name, http_only in COOKIE_SCHEMA
    ]
    document: dict = {"cookies": entries}
    for key in reversed(COOKIES_PATH[:-1]):
        document = {key: document}
    return _dump(document)


def encode_client_settings(region: str = DEFAULT_REGION, locale: str = DEFAULT_LOCALE) -> str:
    """Render RiotClientSettings.yaml; carries no secrets."""
    document = {
        "install": {
            "globals": {
                "region": (region or DEFAULT_REGION).upper(),
                "locale": locale,
            }
        },
        "patchlines": {"valorant": PATCHLINE},
    }
    return _dump(document)


def encode(
    cookies: Mapping[str, str],
    region: str = DEFAULT_REGION,
    locale: str = DEFAULT_LOCALE,
) -> tuple[str, str]:
    """Render both settings files.

    Returns:
        Tuple of (private settings text, client settings text).
    """
    return encode_private_settings(cookies), encode_client_settings(region, locale)

"""
Nebula Configuration — validated runtime settings.

Reads overrides from environment variables:
    NEBULA_STORE_PATH = <path to the persisted settings document>
    NEBULA_VAULT_SERVICE = <keyring service namespace>
    NEBULA_INSTALLS_FILE = <path to RiotClientInstalls.json>
    NEBULA_DATA_ROOT = <Riot Games local data directory>
    NEBULA_LOCALE = <xx_XX>
    NEBULA_WATCH_INTERVAL = <seconds between process polls>
    NEBULA_SETTLE_DELAY = <seconds to wait after killing processes>

Defaults follow the locations the Riot Client uses on Windows.
"""
import os
import re
import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .conf import VAULT_SERVICE_NAME, INSTALLS_FILE, DEFAULT_LOCALE

logger = logging.getLogger("nebula.config")

_LOCALE_PATTERN = re.compile(r"^[a-z]{2}_[A-Z]{2}$")


def default_store_path() -> Path:
    return Path.home() / ".nebula" / "config.json"


def default_installs_file() -> Path:
    """Return the RiotClientInstalls.json location under %ProgramData%."""
    program_data = os.environ.get("ProgramData", r"C:\ProgramData")
    return Path(program_data) / "Riot Games" / INSTALLS_FILE


def default_data_root() -> Path:
    """Return the Riot Games folder under %LOCALAPPDATA%."""
    local_app_data = os.environ.get("LOCALAPPDATA")
    if local_app_data:
        return Path(local_app_data) / "Riot Games"
    return Path.home() / "AppData" / "Local" / "Riot Games"


class NebulaConfig(BaseModel):
    """Validated Nebula configuration."""

    store_path: Path = Field(default_factory=default_store_path)
    vault_service: str = Field(default=VAULT_SERVICE_NAME)
    installs_file: Path = Field(default_factory=default_installs_file)
    data_root: Path = Field(default_factory=default_data_root)
    locale: str = Field(default=DEFAULT_LOCALE)
    watch_interval: float = Field(default=5.0, gt=0)
    settle_delay: float = Field(default=1.5, ge=0)

    @field_validator("vault_service")
    @classmethod
    def validate_service(cls, v: str) -> str:
        """Keyring entries need a non-empty service name."""
        if not v.strip():
            raise ValueError("vault_service cannot be empty")
        return v

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        """Validate locale looks like en_US."""
        if not _LOCALE_PATTERN.match(v):
            raise ValueError(f"Unsupported locale format: {v}")
        return v

    @classmethod
    def from_env(cls) -> "NebulaConfig":
        """Create NebulaConfig by loading overrides from environment.

        Returns:
            Populated NebulaConfig instance.
        """
        overrides = {}
        env_map = {
            "NEBULA_STORE_PATH": "store_path",
            "NEBULA_VAULT_SERVICE": "vault_service",
            "NEBULA_INSTALLS_FILE": "installs_file",
            "NEBULA_DATA_ROOT": "data_root",
            "NEBULA_LOCALE": "locale",
            "NEBULA_WATCH_INTERVAL": "watch_interval",
            "NEBULA_SETTLE_DELAY": "settle_delay",
        }
        for env_name, field in env_map.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field] = value
        config = cls(**overrides)
        logger.debug(
            "Loaded config: store=%s data_root=%s", config.store_path, config.data_root
        )
        return config

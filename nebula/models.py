"""Data models shared by the vault, the account directory and the launcher."""
from enum import Enum
from typing import Optional
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .conf import DEFAULT_REGION, SSID_COOKIE, SUB_COOKIE


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    """Base model persisted with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class Account(CamelModel):
    """Non-secret account metadata."""

    id: str
    display_name: str
    region: str = DEFAULT_REGION
    created_at: datetime = Field(default_factory=utcnow)
    last_used_at: Optional[datetime] = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v:
            raise ValueError("Account id cannot be empty")
        return v

    @field_validator("region")
    @classmethod
    def normalize_region(cls, v: str) -> str:
        return (v or DEFAULT_REGION).upper()

    @field_validator("created_at", "last_used_at")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class SecretRecord(CamelModel):
    """Session cookies for one account.

    ``ssid`` authenticates the session, ``sub`` names its owner (PUUID).
    The remaining cookies travel with the session but may be missing.
    """

    account_id: str
    ssid: Optional[str] = None
    sub: Optional[str] = None
    tdid: Optional[str] = None
    clid: Optional[str] = None
    csid: Optional[str] = None

    @property
    def is_launchable(self) -> bool:
        return bool(self.ssid) and bool(self.sub)

    def cookies(self) -> dict[str, str]:
        """Return the cookie name to value mapping, skipping unset cookies."""
        return {
            name: value
            for name, value in self.model_dump(exclude={"account_id"}).items()
            if value
        }

    @classmethod
    def from_cookies(cls, cookies: dict[str, str]) -> "SecretRecord":
        return cls(
            account_id=cookies[SUB_COOKIE],
            ssid=cookies.get(SSID_COOKIE),
            sub=cookies.get(SUB_COOKIE),
            tdid=cookies.get("tdid"),
            clid=cookies.get("clid"),
            csid=cookies.get("csid"),
        )


class Theme(str, Enum):
    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


class Settings(CamelModel):
    valorant_path: Optional[str] = None
    theme: Theme = Theme.SYSTEM


class LaunchPhase(str, Enum):
    IDLE = "idle"
    LAUNCHING = "launching"
    RUNNING = "running"
    ERROR = "error"
    CLOSED = "closed"


class LaunchSession(BaseModel):
    """In-flight launch, never persisted."""

    account_id: str
    phase: LaunchPhase = LaunchPhase.LAUNCHING
    error: Optional[str] = None
    generation: int = 0


class ImportedSession(BaseModel):
    """Result of reading the Riot Client's live session."""

    account: Account
    secret: SecretRecord

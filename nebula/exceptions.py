"""Nebula error taxonomy.

Every error carries a machine-readable ``code`` so callers at the command
boundary can tell failures apart without parsing messages.
"""


class NebulaError(Exception):
    """Base class for all Nebula failures."""

    code = "error"

    def __init__(self, message: str = None):
        super().__init__(message or self.__class__.__doc__)

    @property
    def message(self) -> str:
        return str(self)


class VaultError(NebulaError):
    """Secure storage failure."""

    code = "vault_error"


class VaultUnavailable(VaultError):
    """Secure storage backend is unavailable."""

    code = "vault_unavailable"


class VaultReadError(VaultError):
    """Stored secret could not be read back."""

    code = "vault_read_error"


class IncompleteAccountData(NebulaError):
    """Account data incomplete or missing SSID."""

    code = "incomplete_account_data"


class TargetNotConfigured(NebulaError):
    """Riot Client path not set or invalid. Please configure it in settings."""

    code = "target_not_configured"


class ExecutableNotFound(NebulaError):
    """Could not find Riot Client installation."""

    code = "executable_not_found"


class PathResolutionFailed(NebulaError):
    """Could not locate Riot Client data directories."""

    code = "path_resolution_failed"


class ConfigWriteFailed(NebulaError):
    """Failed to write Riot auth/settings files."""

    code = "config_write_failed"


class SpawnFailed(NebulaError):
    """Failed to start Riot Client."""

    code = "spawn_failed"


class NoActiveSession(NebulaError):
    """No logged-in Riot Client session found. Is the Riot Client running and logged in?"""

    code = "no_active_session"


class DataDirNotFound(NebulaError):
    """Could not locate Riot Client data directories."""

    code = "data_dir_not_found"


class AuthenticationError(NebulaError):
    """Authentication failed."""

    code = "authentication_failed"


class MfaRequired(AuthenticationError):
    """Multi-factor authentication is required."""

    code = "mfa_required"


class AccountExists(NebulaError):
    """Account already exists."""

    code = "account_exists"


class LaunchSuperseded(NebulaError):
    """Launch was replaced by a newer launch request."""

    code = "launch_superseded"

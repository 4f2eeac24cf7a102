"""Nebula — multi-account session switcher for the Riot Client."""
from .version import __version__
from .config import NebulaConfig
from .models import Account, SecretRecord, LaunchPhase, LaunchSession, Settings, Theme
from .store import DocumentStore
from .directory import AccountDirectory
from .vault import SecureVault
from .session import SessionImporter
from .process import ProcessWatcher, select_controller
from .launcher import LaunchOrchestrator
from .commands import CommandSurface

__all__ = [
    "__version__",
    "NebulaConfig",
    "Account",
    "SecretRecord",
    "LaunchPhase",
    "LaunchSession",
    "Settings",
    "Theme",
    "DocumentStore",
    "AccountDirectory",
    "SecureVault",
    "SessionImporter",
    "ProcessWatcher",
    "select_controller",
    "LaunchOrchestrator",
    "CommandSurface",
]

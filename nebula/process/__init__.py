"""Riot Client process management."""

from .controller import (
    ProcessController,
    WindowsProcessController,
    PosixProcessController,
    select_controller,
)
from .watcher import ProcessWatcher

__all__ = [
    "ProcessController",
    "WindowsProcessController",
    "PosixProcessController",
    "select_controller",
    "ProcessWatcher",
]

"""Riot Client session files: codec, location and import."""

from . import codec
from .paths import ClientPaths, resolve_client_paths
from .importer import SessionImporter

__all__ = [
    "codec",
    "ClientPaths",
    "resolve_client_paths",
    "SessionImporter",
]

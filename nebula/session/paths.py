"""Locate the Riot Client's live Data and Config directories."""
import logging
from pathlib import Path
from typing import NamedTuple, Union

from ..conf import (
    BETA_CONFIG_FOLDER,
    BETA_DATA_FOLDER,
    CLIENT_SETTINGS_FILE,
    DEFAULT_CONFIG_FOLDER,
    DEFAULT_DATA_FOLDER,
    PRIVATE_SETTINGS_FILE,
)
from ..exceptions import DataDirNotFound

logger = logging.getLogger("nebula.session")


class ClientPaths(NamedTuple):
    data_dir: Path
    config_dir: Path
    variant: str

    @property
    def private_settings(self) -> Path:
        return self.data_dir / PRIVATE_SETTINGS_FILE

    @property
    def client_settings(self) -> Path:
        return self.config_dir / CLIENT_SETTINGS_FILE


def candidate_paths(data_root: Union[str, Path]) -> list[ClientPaths]:
    """Return the Beta and default layouts, Beta first."""
    root = Path(data_root)
    return [
        ClientPaths(root.joinpath(*BETA_DATA_FOLDER), root.joinpath(*BETA_CONFIG_FOLDER), "beta"),
        ClientPaths(root.joinpath(*DEFAULT_DATA_FOLDER), root.joinpath(*DEFAULT_CONFIG_FOLDER), "default"),
    ]


def resolve_client_paths(data_root: Union[str, Path]) -> ClientPaths:
    """Pick the directories the Riot Client is currently using.

    The Beta layout wins when both its Data and Config folders exist.

    Raises:
        DataDirNotFound: If neither layout exists under ``data_root``.
    """
    for paths in candidate_paths(data_root):
        if paths.data_dir.is_dir() and paths.config_dir.is_dir():
            logger.debug("Using %s Riot Client data paths", paths.variant)
            return paths
    logger.error("No Riot Client data/config directories under %s", data_root)
    raise DataDirNotFound(
        f"Could not locate Riot Client data directories under {data_root}"
    )

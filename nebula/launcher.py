"""
LaunchOrchestrator — switch the Riot Client to a stored account and start it.

Phases reported on the ``launch-status`` channel::

    idle -> launching -> running -> closed -> idle
                      \\-> error

``launch()`` drives everything up to the spawn; the ProcessWatcher reports
``running`` and ``closed`` afterwards. Failures never escape ``launch()``:
they come back as ``{"success": False, "error": ..., "code": ...}`` and an
``error`` status event.
"""
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from .conf import DEFAULT_LOCALE, LAUNCH_ARGS, VALORANT_PATH_KEY
from .directory import AccountDirectory
from .exceptions import (
    ConfigWriteFailed,
    DataDirNotFound,
    ExecutableNotFound,
    IncompleteAccountData,
    LaunchSuperseded,
    NebulaError,
    PathResolutionFailed,
    TargetNotConfigured,
)
from .models import Account, LaunchPhase, LaunchSession, SecretRecord
from .process import ProcessController, ProcessWatcher
from .session import codec
from .session.paths import ClientPaths, resolve_client_paths
from .store import DocumentStore
from .vault import SecureVault

logger = logging.getLogger("nebula.launcher")

LAUNCH_STATUS = "launch-status"
BLOCKING_ERROR = "blocking-error"

Emitter = Callable[[str, dict], None]


class LaunchOrchestrator:
    """Coordinates vault, process control, file injection and the watcher."""

    def __init__(
        self,
        directory: AccountDirectory,
        vault: SecureVault,
        controller: ProcessController,
        store: DocumentStore,
        emit: Emitter,
        data_root: Union[str, Path],
        locale: str = DEFAULT_LOCALE,
        watch_interval: float = 5.0,
    ):
        self._directory = directory
        self._vault = vault
        self._controller = controller
        self._store = store
        self._emit = emit
        self._data_root = Path(data_root)
        self._locale = locale
        self._watcher = ProcessWatcher(controller, self._on_watcher_status, watch_interval)
        self._session: Optional[LaunchSession] = None

    @property
    def session(self) -> Optional[LaunchSession]:
        return self._session

    @property
    def watcher(self) -> ProcessWatcher:
        return self._watcher

    @property
    def phase(self) -> LaunchPhase:
        return self._session.phase if self._session else LaunchPhase.IDLE

    def _emit_status(self, account_id: str, phase: LaunchPhase, message: str = None) -> None:
        payload = {"accountId": account_id, "phase": phase.value}
        if message:
            payload["message"] = message
        self._emit(LAUNCH_STATUS, payload)

    async def launch(self, account_id: str) -> dict:
        """Switch the Riot Client to ``account_id`` and start it.

        A newer ``launch()`` that starts while this one is still waiting on
        the vault or the process controller supersedes it: this call stops
        before its next side effect and returns ``launch_superseded``.

        Returns:
            ``{"success": True}`` once the client is spawned, otherwise
            ``{"success": False, "error": message, "code": code}``.
        """
        session = LaunchSession(account_id=account_id)
        self._session = session
        self._emit_status(account_id, LaunchPhase.LAUNCHING)
        try:
            await self._launch(session)
        except LaunchSuperseded as err:
            logger.info("Launch for account %s superseded", account_id)
            return {"success": False, "error": err.message, "code": err.code}
        except TargetNotConfigured as err:
            self._fail(account_id, err.message)
            self._emit(BLOCKING_ERROR, {
                "accountId": account_id,
                "title": "Riot Client not configured",
                "message": err.message,
            })
            return {"success": False, "error": err.message, "code": err.code}
        except NebulaError as err:
            self._fail(account_id, err.message)
            return {"success": False, "error": err.message, "code": err.code}
        except Exception as err:
            logger.exception("Unexpected error launching account %s", account_id)
            self._fail(account_id, str(err))
            return {"success": False, "error": str(err), "code": NebulaError.code}
        return {"success": True}

    def _fail(self, account_id: str, message: str) -> None:
        logger.error("Launch failed for account %s: %s", account_id, message)
        if self._session and self._session.account_id == account_id:
            self._session.phase = LaunchPhase.ERROR
            self._session.error = message
        self._emit_status(account_id, LaunchPhase.ERROR, message)

    def _ensure_current(self, session: LaunchSession) -> None:
        if self._session is not session:
            raise LaunchSuperseded()

    async def _launch(self, session: LaunchSession) -> None:
        account_id = session.account_id
        account, secret = await self._load_account(account_id)
        executable = await self._find_target()
        self._ensure_current(session)

        try:
            await self._controller.close_all()
        except Exception as err:
            logger.warning("Could not close Riot processes, continuing: %s", err)
        self._ensure_current(session)

        try:
            paths = resolve_client_paths(self._data_root)
        except DataDirNotFound as err:
            raise PathResolutionFailed(err.message) from err

        self._write_settings(paths, account, secret)
        await self._controller.start(executable, LAUNCH_ARGS)
        logger.info("Riot Client launch initiated for account %s", account_id)
        self._ensure_current(session)

        self._directory.touch_last_used(account_id)
        session.generation = self._watcher.start(account_id)

    async def _load_account(self, account_id: str) -> tuple[Account, SecretRecord]:
        account = self._directory.get(account_id)
        if account is None:
            raise IncompleteAccountData(f"Account {account_id} not found.")
        secret = await self._vault.retrieve(account_id)
        if secret is None or not secret.is_launchable:
            raise IncompleteAccountData("Account data incomplete or missing SSID.")
        return account, secret

    async def _find_target(self) -> Path:
        if not self._store.get(VALORANT_PATH_KEY):
            raise TargetNotConfigured()
        try:
            return await self._controller.find_executable()
        except ExecutableNotFound as err:
            raise TargetNotConfigured(
                f"Riot Client path not set or invalid. {err.message}"
            ) from err

    def _write_settings(self, paths: ClientPaths, account: Account, secret: SecretRecord) -> None:
        private_text, client_text = codec.encode(secret.cookies(), account.region, self._locale)
        try:
            paths.data_dir.mkdir(parents=True, exist_ok=True)
            paths.config_dir.mkdir(parents=True, exist_ok=True)
            paths.private_settings.write_text(private_text, encoding="utf-8")
            logger.info("Wrote %s for %s", paths.private_settings.name, account.id)
            paths.client_settings.write_text(client_text, encoding="utf-8")
            logger.info("Wrote %s for %s", paths.client_settings.name, account.id)
        except OSError as err:
            raise ConfigWriteFailed(
                f"Failed to write Riot auth/settings files: {err}"
            ) from err

    def _on_watcher_status(self, account_id: str, phase: LaunchPhase, generation: int) -> None:
        if not self._watcher.is_current(generation):
            logger.debug("Dropping status from superseded watcher %d", generation)
            return
        self._emit_status(account_id, phase)
        if self._session is None or self._session.account_id != account_id:
            return
        if phase is LaunchPhase.CLOSED:
            self._session = None
        else:
            self._session.phase = phase

    def shutdown(self) -> None:
        self._watcher.stop()

"""
CommandSurface — the request/response API the UI layer calls.

Every command returns ``{"success": bool, ...}``; failures carry ``error``
(human readable) and ``code`` (machine readable). Asynchronous notifications
go through the ``emit(channel, payload)`` callable on the channels
``launch-status``, ``theme-changed`` and ``blocking-error``.
"""
import inspect
import logging
import webbrowser
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, Union
from urllib.parse import urlparse

from keyring.backend import KeyringBackend

from .auth import Authenticator, PlaceholderAuthenticator
from .conf import THEME_KEY, VALORANT_PATH_KEY
from .config import NebulaConfig
from .directory import AccountDirectory
from .exceptions import AccountExists, ExecutableNotFound, NebulaError
from .launcher import Emitter, LaunchOrchestrator
from .models import Account, Settings, Theme, as_utc
from .process import ProcessController, select_controller
from .session import SessionImporter
from .store import DocumentStore
from .vault import SecureVault

logger = logging.getLogger("nebula.commands")

THEME_CHANGED = "theme-changed"

_NEVER = datetime.min.replace(tzinfo=timezone.utc)

DirectoryChooser = Callable[[], Union[Optional[str], Awaitable[Optional[str]]]]


def _failure(err: Exception) -> dict:
    if isinstance(err, NebulaError):
        return {"success": False, "error": err.message, "code": err.code}
    return {"success": False, "error": str(err), "code": NebulaError.code}


def _noop_emit(channel: str, payload: dict) -> None:
    logger.debug("Unhandled event %s: %s", channel, payload)


class CommandSurface:
    """Account, launch and settings commands over the Nebula components."""

    def __init__(
        self,
        store: DocumentStore,
        directory: AccountDirectory,
        vault: SecureVault,
        controller: ProcessController,
        importer: SessionImporter,
        orchestrator: LaunchOrchestrator,
        authenticator: Authenticator,
        emit: Emitter,
        open_url: Callable[[str], Any] = webbrowser.open,
    ):
        self._store = store
        self._directory = directory
        self._vault = vault
        self._controller = controller
        self._importer = importer
        self._orchestrator = orchestrator
        self._authenticator = authenticator
        self._emit = emit
        self._open_url = open_url

    @classmethod
    def create(
        cls,
        config: Optional[NebulaConfig] = None,
        emit: Optional[Emitter] = None,
        vault_backend: Optional[KeyringBackend] = None,
        controller: Optional[ProcessController] = None,
        authenticator: Optional[Authenticator] = None,
        open_url: Callable[[str], Any] = webbrowser.open,
    ) -> "CommandSurface":
        """Wire every component from a NebulaConfig.

        Args:
            config: Settings; read from the environment when omitted.
            emit: Event sink for the UI.
            vault_backend: keyring backend; the platform default when omitted.
            controller: Process controller; picked for this platform when omitted.
            authenticator: Sign-in implementation; the placeholder when omitted.
            open_url: Browser opener.

        Returns:
            Ready CommandSurface.
        """
        if config is None:
            config = NebulaConfig.from_env()
        if emit is None:
            emit = _noop_emit
        if authenticator is None:
            authenticator = PlaceholderAuthenticator()
        store = DocumentStore(config.store_path)
        directory = AccountDirectory(store)
        vault = SecureVault(config.vault_service, backend=vault_backend)
        if controller is None:
            controller = select_controller(config.installs_file, config.settle_delay)
        orchestrator = LaunchOrchestrator(
            directory,
            vault,
            controller,
            store,
            emit,
            data_root=config.data_root,
            locale=config.locale,
            watch_interval=config.watch_interval,
        )
        return cls(
            store=store,
            directory=directory,
            vault=vault,
            controller=controller,
            importer=SessionImporter(config.data_root),
            orchestrator=orchestrator,
            authenticator=authenticator,
            emit=emit,
            open_url=open_url,
        )

    @property
    def orchestrator(self) -> LaunchOrchestrator:
        return self._orchestrator

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def get_accounts(self) -> dict:
        """List accounts, most recently used first."""
        try:
            accounts = sorted(
                self._directory.list(),
                key=lambda account: as_utc(account.last_used_at) or _NEVER,
                reverse=True,
            )
        except Exception as err:
            logger.error("Error listing accounts: %s", err)
            return _failure(err)
        return {"success": True, "accounts": [a.to_document() for a in accounts]}

    async def add_account(self, username: str, password: str) -> dict:
        try:
            secret = await self._authenticator.authenticate(username, password)
            if secret.account_id in self._directory:
                raise AccountExists()
            await self._vault.store(secret.account_id, secret)
            account = self._directory.upsert(
                Account(id=secret.account_id, display_name=username)
            )
        except Exception as err:
            logger.error("Error adding account: %s", err)
            return _failure(err)
        return {"success": True, "account": account.to_document()}

    async def import_current_session(self) -> dict:
        """Import the Riot Client's logged-in session.

        A session for a known account refreshes its cookies and leaves the
        account metadata alone.
        """
        try:
            imported = await self._importer.import_current_session()
            account_id = imported.account.id
            await self._vault.store(account_id, imported.secret)
            account = self._directory.get(account_id)
            if account is None:
                account = self._directory.upsert(imported.account)
            else:
                logger.info("Account %s already exists, updated cookies", account_id)
        except Exception as err:
            logger.error("Error importing account: %s", err)
            return _failure(err)
        return {"success": True, "account": account.to_document()}

    async def remove_account(self, account_id: str) -> dict:
        try:
            await self._vault.delete(account_id)
            self._directory.remove(account_id)
        except Exception as err:
            logger.error("Error removing account %s: %s", account_id, err)
            return _failure(err)
        return {"success": True}

    async def launch(self, account_id: str) -> dict:
        return await self._orchestrator.launch(account_id)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_settings(self) -> dict:
        try:
            settings = Settings(
                valorant_path=self._store.get(VALORANT_PATH_KEY),
                theme=self._store.get(THEME_KEY) or Theme.SYSTEM,
            )
        except ValueError as err:
            logger.warning("Stored settings invalid, using defaults: %s", err)
            settings = Settings(valorant_path=self._store.get(VALORANT_PATH_KEY))
        return {"success": True, **settings.to_document()}

    async def save_settings(self, settings: dict) -> dict:
        """Persist the provided settings; empty values are left untouched."""
        valorant_path = settings.get(VALORANT_PATH_KEY)
        theme = settings.get(THEME_KEY)
        try:
            theme = Theme(theme) if theme else None
        except ValueError:
            return {"success": False, "error": f"Unknown theme: {theme}", "code": "invalid_settings"}
        if valorant_path:
            self._store.set(VALORANT_PATH_KEY, str(valorant_path))
        if theme is not None:
            self._store.set(THEME_KEY, theme.value)
            self._emit(THEME_CHANGED, {"theme": theme.value})
        return {"success": True}

    async def pick_install_directory(self, chooser: DirectoryChooser) -> dict:
        """Ask the UI for the Riot Games directory and store it if valid.

        Args:
            chooser: Returns the chosen directory, or None if cancelled.
        """
        chosen = chooser()
        if inspect.isawaitable(chosen):
            chosen = await chosen
        if not chosen:
            return {"success": False}
        if not Path(chosen).is_dir():
            return {"success": False, "error": "Invalid path selected.", "code": "invalid_path"}
        try:
            await self._controller.find_executable()
        except ExecutableNotFound as err:
            logger.error("No Riot Client found for %s: %s", chosen, err)
            return {
                "success": False,
                "error": "Selected directory does not seem to contain a valid Riot Client installation.",
                "code": err.code,
            }
        self._store.set(VALORANT_PATH_KEY, str(chosen))
        return {"success": True, "path": str(chosen)}

    async def open_external_url(self, url: str) -> dict:
        if urlparse(url or "").scheme not in ("http", "https"):
            return {"success": False, "error": f"Refusing to open {url!r}", "code": "invalid_url"}
        self._open_url(url)
        return {"success": True}

    def shutdown(self) -> None:
        self._orchestrator.shutdown()

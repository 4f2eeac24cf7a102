"""
Shared fixtures: an in-memory keyring, a scripted process controller and a
temporary Riot Games directory tree.
"""
import asyncio

import orjson
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import NoKeyringError, PasswordDeleteError, PasswordSetError

from nebula.config import NebulaConfig
from nebula.directory import AccountDirectory
from nebula.process.controller import ProcessController
from nebula.store import DocumentStore
from nebula.vault import SecureVault


class MemoryKeyring(KeyringBackend):
    """Keyring backend keeping entries in a dict."""

    priority = 0.1

    def __init__(self):
        super().__init__()
        self.entries = {}

    def get_password(self, service, username):
        return self.entries.get((service, username))

    def set_password(self, service, username, password):
        self.entries[(service, username)] = password

    def delete_password(self, service, username):
        try:
            del self.entries[(service, username)]
        except KeyError:
            raise PasswordDeleteError("not found") from None


class BrokenKeyring(KeyringBackend):
    """Keyring backend with no usable store behind it."""

    priority = 0.1

    def get_password(self, service, username):
        raise NoKeyringError("no backend")

    def set_password(self, service, username, password):
        raise PasswordSetError("locked")

    def delete_password(self, service, username):
        raise PasswordSetError("locked")


class FakeController(ProcessController):
    """ProcessController that records calls instead of touching the OS.

    ``running`` is a list of answers for successive ``is_target_running``
    calls; the last answer repeats.
    """

    def __init__(self, installs_file, running=None):
        super().__init__(installs_file, settle_delay=0)
        self.running = list(running or [False])
        self.calls = []
        self.started = []
        self.close_error = None
        self.close_delay = 0
        self.start_error = None

    def _detach_options(self):
        return {}

    async def close_all(self):
        self.calls.append("close_all")
        if self.close_delay:
            await asyncio.sleep(self.close_delay)
        if self.close_error:
            raise self.close_error

    async def is_target_running(self):
        self.calls.append("is_target_running")
        if len(self.running) > 1:
            return self.running.pop(0)
        return self.running[0]

    async def start(self, path, args=()):
        self.calls.append("start")
        if self.start_error:
            raise self.start_error
        self.started.append((str(path), tuple(args)))
        return 4242


@pytest.fixture
def keyring_backend():
    return MemoryKeyring()


@pytest.fixture
def vault(keyring_backend):
    return SecureVault("NebulaTest", backend=keyring_backend)


@pytest.fixture
def riot_root(tmp_path):
    """Riot Games data root with the default Data/Config layout."""
    root = tmp_path / "Riot Games"
    (root / "Riot Client" / "Data").mkdir(parents=True)
    (root / "Riot Client" / "Config").mkdir(parents=True)
    return root


@pytest.fixture
def installs_file(tmp_path):
    """RiotClientInstalls.json pointing rc_live at an existing executable."""
    exe = tmp_path / "RiotClientServices.exe"
    exe.write_bytes(b"MZ")
    manifest = tmp_path / "RiotClientInstalls.json"
    manifest.write_bytes(orjson.dumps({"rc_live": str(exe)}))
    return manifest


@pytest.fixture
def config(tmp_path, riot_root, installs_file):
    return NebulaConfig(
        store_path=tmp_path / "nebula" / "config.json",
        vault_service="NebulaTest",
        installs_file=installs_file,
        data_root=riot_root,
        watch_interval=0.01,
        settle_delay=0,
    )


@pytest.fixture
def store(config):
    return DocumentStore(config.store_path)


@pytest.fixture
def directory(store):
    return AccountDirectory(store)


@pytest.fixture
def controller(installs_file):
    return FakeController(installs_file)


@pytest.fixture
def events():
    """Recorder usable as an ``emit`` callable."""

    class Recorder(list):
        def __call__(self, channel, payload):
            self.append((channel, payload))

        def on(self, channel):
            return [payload for name, payload in self if name == channel]

    return Recorder()


async def wait_for(predicate, timeout=2.0):
    """Poll ``predicate`` until it is true or ``timeout`` seconds pass."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)

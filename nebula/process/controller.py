"""
ProcessController — find, kill, start and probe the Riot Client.

One capability interface with a Windows implementation (taskkill/tasklist)
and a POSIX one (pkill/pgrep). ``select_controller()`` picks the right one
once at startup.
"""
import sys
import asyncio
import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence, Union

import orjson

from ..conf import INSTALL_KEYS, PROTECTED_PROCESSES, TARGET_PROCESS
from ..exceptions import ExecutableNotFound, SpawnFailed

logger = logging.getLogger("nebula.process")


class ProcessController(ABC):
    """Platform-specific process management for the Riot Client."""

    def __init__(
        self,
        installs_file: Union[str, Path],
        settle_delay: float = 1.5,
        process_names: Sequence[str] = PROTECTED_PROCESSES,
        target_process: str = TARGET_PROCESS,
    ):
        self.installs_file = Path(installs_file)
        self.settle_delay = settle_delay
        self.process_names = tuple(process_names)
        self.target_process = target_process

    async def find_executable(self) -> Path:
        """Read RiotClientInstalls.json and return the first existing client.

        Keys are checked in order: rc_live, rc_default, rc_beta, rc_esports.

        Raises:
            ExecutableNotFound: If the manifest is missing, unparsable, or no
                key points to an existing file.
        """
        try:
            install_data = orjson.loads(self.installs_file.read_bytes())
        except (OSError, orjson.JSONDecodeError) as err:
            logger.error("Cannot read %s: %s", self.installs_file, err)
            raise ExecutableNotFound(
                f"Could not find Riot Client installation. "
                f"Ensure Riot Games is installed. ({err})"
            ) from err
        if isinstance(install_data, dict):
            for key in INSTALL_KEYS:
                candidate = install_data.get(key)
                if isinstance(candidate, str) and candidate and Path(candidate).is_file():
                    logger.info("Found Riot Client executable at %s (%s)", candidate, key)
                    return Path(candidate)
        raise ExecutableNotFound(
            f"No valid Riot Client executable found in {self.installs_file.name}."
        )

    async def start(self, path: Union[str, Path], args: Sequence[str] = ()) -> int:
        """Spawn ``path`` detached from Nebula with no inherited stdio.

        Returns:
            PID of the spawned process. Spawning does not mean the client
            started correctly.

        Raises:
            SpawnFailed: If the OS refuses to create the process.
        """
        command = [str(path), *args]
        logger.info("Executing Riot Client: %s", " ".join(command))
        try:
            proc = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                close_fds=True,
                **self._detach_options(),
            )
        except (OSError, ValueError) as err:
            logger.error("Failed to spawn %s: %s", path, err)
            raise SpawnFailed(f"Failed to start Riot Client: {err}") from err
        return proc.pid

    async def _run(self, *command: str) -> tuple[int, str, str]:
        """Run a command to completion and return (returncode, stdout, stderr)."""
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        return (
            proc.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def _settle(self) -> None:
        if self.settle_delay > 0:
            await asyncio.sleep(self.settle_delay)

    @abstractmethod
    def _detach_options(self) -> dict:
        """Popen keyword arguments that detach the child from Nebula."""

    @abstractmethod
    async def close_all(self) -> None:
        """Force-kill every protected process; none running is not an error."""

    @abstractmethod
    async def is_target_running(self) -> bool:
        """Return True if the game process is running; never raises."""


class WindowsProcessController(ProcessController):

    def _detach_options(self) -> dict:
        flags = getattr(subprocess, "DETACHED_PROCESS", 0x00000008)
        flags |= getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0x00000200)
        return {"creationflags": flags}

    @staticmethod
    def _is_not_found(stderr: str) -> bool:
        text = stderr.lower()
        return "not found" in text or "error: the process" in text

    async def close_all(self) -> None:
        command = ["taskkill", "/F"]
        for name in self.process_names:
            command += ["/IM", name]
        command.append("/T")
        logger.info("Closing Riot and Valorant processes")
        returncode, stdout, stderr = await self._run(*command)
        if returncode != 0 and not self._is_not_found(stderr):
            logger.warning("taskkill failed (%s): %s", returncode, stderr.strip())
        elif stdout.strip():
            logger.debug("taskkill output: %s", stdout.strip())
        await self._settle()

    async def is_target_running(self) -> bool:
        try:
            returncode, stdout, _ = await self._run(
                "tasklist", "/FI", f"IMAGENAME eq {self.target_process}", "/NH",
            )
        except Exception as err:
            logger.error("Error checking %s: %s", self.target_process, err)
            return False
        if returncode != 0:
            return False
        return self.target_process.lower() in stdout.lower()


class PosixProcessController(ProcessController):

    def _detach_options(self) -> dict:
        return {"start_new_session": True}

    async def close_all(self) -> None:
        pattern = "|".join(self.process_names)
        logger.info("Closing Riot and Valorant processes")
        returncode, stdout, stderr = await self._run("pkill", "-f", pattern)
        # pkill exits 1 when nothing matched
        if returncode not in (0, 1):
            logger.warning("pkill failed (%s): %s", returncode, stderr.strip())
        elif stdout.strip():
            logger.debug("pkill output: %s", stdout.strip())
        await self._settle()

    async def is_target_running(self) -> bool:
        try:
            returncode, stdout, _ = await self._run("pgrep", "-f", self.target_process)
        except Exception as err:
            logger.error("Error checking %s: %s", self.target_process, err)
            return False
        return returncode == 0 and bool(stdout.strip())


def select_controller(
    installs_file: Union[str, Path],
    settle_delay: float = 1.5,
    platform: str = None,
) -> ProcessController:
    """Return the ProcessController for ``platform`` (default: this one)."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return WindowsProcessController(installs_file, settle_delay)
    return PosixProcessController(installs_file, settle_delay)

"""
ProcessWatcher — poll the game process after a launch.

Reports ``running`` the first time the game shows up and ``closed`` once it
disappears again, then stops. Only one watcher runs at a time: ``start()``
cancels the previous poll and bumps the generation counter, and every tick
checks its generation before reporting, so a superseded poll never speaks.
"""
import asyncio
import logging
from typing import Callable, Optional

from ..models import LaunchPhase
from .controller import ProcessController

logger = logging.getLogger("nebula.process")

StatusCallback = Callable[[str, LaunchPhase, int], None]


class ProcessWatcher:

    def __init__(
        self,
        controller: ProcessController,
        on_status: StatusCallback,
        interval: float = 5.0,
    ):
        self._controller = controller
        self._on_status = on_status
        self._interval = interval
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._account_id: Optional[str] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def account_id(self) -> Optional[str]:
        return self._account_id

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def start(self, account_id: str) -> int:
        """Replace any running poll with one for ``account_id``.

        Must be called from within the event loop.

        Returns:
            The generation of the new poll.
        """
        self.stop()
        self._generation += 1
        self._account_id = account_id
        self._task = asyncio.get_running_loop().create_task(
            self._poll(self._generation, account_id),
            name=f"nebula-watcher-{self._generation}",
        )
        logger.info("Watcher %d started for account %s", self._generation, account_id)
        return self._generation

    def stop(self) -> None:
        """Cancel the current poll; its pending tick is invalidated too."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
            self._generation += 1
            logger.info("Watcher stopped")
        self._account_id = None

    async def _poll(self, generation: int, account_id: str) -> None:
        seen = False
        while True:
            await asyncio.sleep(self._interval)
            try:
                running = await self._controller.is_target_running()
            except Exception as err:
                logger.error("Watcher tick failed: %s", err)
                continue
            if not self.is_current(generation):
                return
            if running and not seen:
                seen = True
                logger.info("Valorant detected as running")
                self._report(account_id, LaunchPhase.RUNNING, generation)
            elif not running and seen:
                logger.info("Valorant detected as closed")
                self._task = None
                self._account_id = None
                self._report(account_id, LaunchPhase.CLOSED, generation)
                return

    def _report(self, account_id: str, phase: LaunchPhase, generation: int) -> None:
        try:
            self._on_status(account_id, phase, generation)
        except Exception as err:
            logger.error("Watcher status callback failed: %s", err)

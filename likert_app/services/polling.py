# likert_app/services/polling.py
"""Refresco periódico del modelo cliente de resultados (ver results_view)."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from likert_app.core.config import settings

logger = logging.getLogger(__name__)


class ResultsPoller:
    """
    Refresco periódico de la vista de resultados.

    Cada ``interval`` segundos lanza ``refresh``; si la llamada anterior todavía
    no terminó, ese tick se salta (nunca hay dos fetch en vuelo).
    """

    def __init__(self, refresh: Callable[[], Awaitable[Any]], interval: Optional[float] = None):
        self.refresh = refresh
        self.interval = settings.RESULTS_POLL_SECONDS if interval is None else interval
        self.ticks = 0
        self.skipped = 0
        self._inflight: Optional[asyncio.Task] = None
        self._loop_task: Optional[asyncio.Task] = None

    @property
    def busy(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def tick(self) -> bool:
        """Lanza un refresh salvo que haya uno pendiente. Devuelve si lo lanzó."""
        if self.busy:
            self.skipped += 1
            logger.debug("Refresh anterior en curso; se salta el tick")
            return False
        self.ticks += 1
        self._inflight = asyncio.create_task(self.refresh())
        self._inflight.add_done_callback(self._log_failure)
        return True

    @staticmethod
    def _log_failure(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Refresh de resultados falló: %r", exc)

    async def run(self) -> None:
        while True:
            self.tick()
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self.run())
        return self._loop_task

    async def stop(self) -> None:
        for task in (self._loop_task, self._inflight):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._loop_task = None
        self._inflight = None

"""Periodic cleanup of detection history and anomaly baselines."""

import asyncio
from typing import Dict, Optional
from datetime import datetime

import structlog

from .detection import BottleneckDetectionService

logger = structlog.get_logger(__name__)


class MaintenanceSweeper:
    """Runs ``cleanup_historical_data`` on a fixed interval.

    A lock guarantees that at most one sweep runs at a time, whether it was
    started by the background loop or by ``run_once``.
    """

    def __init__(self, service: BottleneckDetectionService, interval_seconds: Optional[float] = None):
        self.service = service
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else service.config.cleanup_interval_seconds
        )
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self.sweeps_completed = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self, now: Optional[datetime] = None) -> Dict[str, int]:
        async with self._lock:
            result = self.service.cleanup_historical_data(now=now)
            self.sweeps_completed += 1
            return result

    def start(self) -> None:
        """Start the background loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Maintenance sweeper started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Maintenance sweeper stopped", sweeps_completed=self.sweeps_completed)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception as e:
                logger.error("Maintenance sweep failed", error=str(e))

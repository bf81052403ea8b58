"""Scan orchestration: analyze an image, then record the result in history."""

from __future__ import annotations

import asyncio
import logging

from .db.history import HistoryStore
from .models import EncodedImage, HistoryEntry
from .pipeline import AnalysisPipeline

logger = logging.getLogger(__name__)


class FridgeScanner:
    """Runs at most one tracked scan at a time.

    A scan that is cancelled before its reply arrives is dropped and never
    appended to history. Scans started concurrently through ``scan`` are not
    serialized: they race on ``HistoryStore.append`` and the last flush wins.
    """

    def __init__(self, pipeline: AnalysisPipeline, history: HistoryStore) -> None:
        self._pipeline = pipeline
        self._history = history
        self._task: asyncio.Task | None = None

    async def scan(self, image: EncodedImage) -> HistoryEntry:
        result = await self._pipeline.analyze(image)
        entry = self._history.append(result)
        logger.info("scan stored as %s", entry.id)
        return entry

    def start(self, image: EncodedImage) -> asyncio.Task:
        """Start a scan in the background and track it for ``cancel``.

        Must be called from a running event loop.
        """
        if self.in_flight:
            raise RuntimeError("a scan is already in progress")
        self._task = asyncio.get_running_loop().create_task(self.scan(image))
        return self._task

    def cancel(self) -> bool:
        """Drop the tracked scan, e.g. when the user navigates away.

        Returns True if a running scan was cancelled.
        """
        if not self.in_flight:
            return False
        logger.info("cancelling in-flight scan")
        return self._task.cancel()

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

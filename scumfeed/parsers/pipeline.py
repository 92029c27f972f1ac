"""
SCUM Feed - Log Pipeline
One instance per Source: locate, read, parse, correlate, persist, dispatch
"""

import asyncio
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..models.events import Event
from ..models.source import Cursor, Source
from .correlator import Correlator
from .grammar import Grammar
from .locator import SourceLocator
from .reader import IncrementalReader

logger = logging.getLogger(__name__)


class LogPipeline:
    """
    LOG PIPELINE
    - Owns the Cursor and correlation state of exactly one Source
    - Ticks never overlap; each one finishes its cursor write before the next starts
    - The cursor is persisted before dispatch: a lost notification is never re-sent
    - Nothing raised inside a tick escapes it
    """

    def __init__(self, source: Source, grammar: Grammar, correlator: Correlator, store, dispatcher,
                 locator: Optional[SourceLocator] = None, reader: Optional[IncrementalReader] = None):
        self.source = source
        self.grammar = grammar
        self.correlator = correlator
        self.store = store
        self.dispatcher = dispatcher
        self.locator = locator or SourceLocator(source)
        self.reader = reader or IncrementalReader(source.encoding)

        self.cursor: Optional[Cursor] = None
        self._lock = asyncio.Lock()
        self.closing = False

        # Counters for status()
        self.last_tick: Optional[datetime] = None
        self.lines_read = 0
        self.events_parsed = 0
        self.events_dispatched = 0
        self.dispatch_failures = 0
        self.rotations = 0

    @property
    def name(self) -> str:
        return self.source.name

    async def start(self):
        """Load the persisted cursor"""
        async with self._lock:
            self.cursor = await self.store.load(self.name)

    async def tick(self) -> int:
        """Run one poll cycle; returns the number of events produced"""
        async with self._lock:
            if self.closing:
                logger.debug(f"[{self.name}] Shutting down, tick skipped")
                return 0
            try:
                return await self._tick()
            except Exception as e:
                logger.error(f"[{self.name}] Tick failed: {e}")
                logger.debug(f"[{self.name}] Tick traceback: {traceback.format_exc()}")
                return 0
            finally:
                self.last_tick = datetime.now(timezone.utc)

    async def _tick(self) -> int:
        if self.cursor is None:
            self.cursor = await self.store.load(self.name)

        path = self.locator.locate()
        if path is None:
            return 0

        batch = await self.reader.read(self.cursor, path)
        if batch is None:
            return 0

        if batch.rotated:
            self.rotations += 1
            self.correlator.reset()

        events = self._parse(batch.lines)
        events = self.correlator.process(events)

        previous = self.cursor
        self.cursor = batch.cursor
        if batch.cursor.position() != previous.position():
            await self.store.save(self.cursor)

        delivered = 0
        for event in events:
            if await self.dispatcher.dispatch(event, self.source):
                delivered += 1

        self.lines_read += len(batch.lines)
        self.events_parsed += len(events)
        self.events_dispatched += delivered
        self.dispatch_failures += len(events) - delivered

        if batch.lines:
            logger.info(
                f"[{self.name}] {len(batch.lines)} new lines, {len(events)} events, "
                f"{delivered} delivered (line {self.cursor.last_line} of {path.name})"
            )
        else:
            logger.debug(f"[{self.name}] No new lines in {path.name}")
        return len(events)

    def _parse(self, lines) -> List[Optional[Event]]:
        """One entry per non-blank line, None where no rule matched"""
        return [self.grammar.parse(line) for line in lines if line.text.strip()]

    async def reset(self):
        """Forget the saved position; the next tick tails from the current end"""
        async with self._lock:
            await self.store.delete(self.name)
            self.cursor = Cursor(self.name)
            self.correlator.reset()
            logger.info(f"[{self.name}] Position reset")

    async def drain(self):
        """Wait for an in-flight tick to finish; ticks queued behind it are skipped"""
        self.closing = True
        async with self._lock:
            pass

    def status(self) -> Dict[str, Any]:
        cursor = self.cursor
        return {
            'source': self.name,
            'tracked_file': cursor.current_file if cursor else None,
            'line_count': cursor.last_line if cursor else 0,
            'last_tick': self.last_tick,
            'lines_read': self.lines_read,
            'events_parsed': self.events_parsed,
            'events_dispatched': self.events_dispatched,
            'dispatch_failures': self.dispatch_failures,
            'rotations': self.rotations,
            'pending_correlations': self.correlator.pending_count,
        }

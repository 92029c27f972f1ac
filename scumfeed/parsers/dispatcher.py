"""
SCUM Feed - Event Dispatcher
Formats events and hands them to the notification sink, best effort
"""

import asyncio
import logging
from typing import Optional

from ..models.events import Event
from ..utils.embed_factory import EmbedFactory

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    DISPATCHER
    - Suppressed event kinds are parsed but never sent
    - Missing sink or missing formatter: the attempt is logged, nothing raised
    - Every sink call is bounded by a timeout and never retried
    """

    def __init__(self, notifier=None, formatter=EmbedFactory, timeout: float = 10.0):
        self.notifier = notifier
        self.formatter = formatter
        self.timeout = timeout

    async def dispatch(self, event: Event, source) -> bool:
        """Deliver one event; True only when the sink accepted it"""
        if event.kind in source.suppress:
            logger.debug(f"[{source.name}] Suppressed {event.kind}: {event.summary}")
            return False

        if self.notifier is None or source.channel is None:
            logger.info(f"[{source.name}] No sink, not delivered: {event.summary}")
            return False

        embed = self._format(event, source)
        if embed is None:
            return False

        try:
            await asyncio.wait_for(self.notifier.send(source.channel, embed), timeout=self.timeout)
            logger.debug(f"[{source.name}] Delivered {event.kind}: {event.summary}")
            return True
        except asyncio.TimeoutError:
            logger.error(f"[{source.name}] Sink timed out after {self.timeout}s, dropped: {event.summary}")
        except Exception as e:
            logger.error(f"[{source.name}] Failed to deliver {event.kind}: {e}")
        return False

    def _format(self, event: Event, source) -> Optional[object]:
        if self.formatter is None:
            logger.info(f"[{source.name}] No formatter, not delivered: {event.summary}")
            return None

        try:
            embed = self.formatter.build(event)
        except Exception as e:
            logger.error(f"[{source.name}] Failed to format {event.kind}: {e}")
            return None

        if embed is None:
            logger.info(f"[{source.name}] No embed for {event.kind}, not delivered: {event.summary}")
        return embed

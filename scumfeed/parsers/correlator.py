"""
SCUM Feed - Event Correlation
Strategies that merge related lines of one Source into composite events
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from ..models.events import Event

logger = logging.getLogger(__name__)


@dataclass
class PendingCorrelation:
    """Partially built correlation held in memory for one key"""
    key: str
    event: Event
    created: datetime
    index: int = -1
    details: List[Event] = field(default_factory=list)


class Correlator:
    """
    Pass-through strategy: every event is emitted as-is

    process() receives one entry per read line; None stands for a line
    no rule matched and is never emitted
    """

    def process(self, events: List[Optional[Event]]) -> List[Event]:
        return [event for event in events if event is not None]

    def reset(self):
        pass

    @property
    def pending_count(self) -> int:
        return 0


class BeforeAfterCorrelator(Correlator):
    """
    BEFORE/AFTER PAIRING
    - A "Before" marker is buffered under its correlation key
    - The matching "After" within the window enriches the most recent
      un-enriched transaction of the same key, in place
    - Markers themselves are never emitted
    - Unanswered "Before" markers age out silently
    """

    def __init__(self, marker_type, transaction_type, window_seconds: float = 5.0):
        self.marker_type = marker_type
        self.transaction_type = transaction_type
        self.window = timedelta(seconds=window_seconds)
        self.pending: Dict[str, PendingCorrelation] = {}

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    def reset(self):
        self.pending.clear()

    def process(self, events: List[Optional[Event]]) -> List[Event]:
        output: List[Event] = []
        latest: Optional[datetime] = None

        for event in events:
            if event is None:
                continue
            latest = event.timestamp if latest is None else max(latest, event.timestamp)

            if isinstance(event, self.marker_type):
                self._handle_marker(event, output)
                continue

            output.append(event)

        if latest is not None:
            self._prune(latest)
        return output

    def _handle_marker(self, marker, output: List[Event]):
        key = marker.correlation_key

        if marker.phase == 'Before':
            if key in self.pending:
                logger.debug(f"Replacing unanswered Before marker for {key}")
            self.pending[key] = PendingCorrelation(key, marker, marker.timestamp)
            return

        pending = self.pending.pop(key, None)
        if pending is None:
            logger.debug(f"After marker for {key} without a Before marker")
            return

        if marker.timestamp - pending.created > self.window:
            logger.debug(f"After marker for {key} arrived outside the {self.window.total_seconds():.0f}s window")
            return

        for index in range(len(output) - 1, -1, -1):
            candidate = output[index]
            if (isinstance(candidate, self.transaction_type)
                    and candidate.correlation_key == key
                    and not candidate.enriched):
                output[index] = candidate.with_balances(pending.event.balance, marker.balance)
                return

        logger.debug(f"No transaction to enrich for {key}")

    def _prune(self, now: datetime):
        expired = [key for key, pending in self.pending.items() if now - pending.created > self.window]
        for key in expired:
            logger.debug(f"Discarding expired Before marker for {key}")
            del self.pending[key]


class SummaryDetailCorrelator(Correlator):
    """
    SUMMARY/DETAIL AGGREGATION
    - A summary event opens a window for its key and is emitted in place
    - Detail events are attached to the open window of their key
    - Any other line, matched or not, closes the open windows; so does
      the end of the batch
    - A detail with no open window is dropped
    """

    def __init__(self, summary_type, detail_type, is_summary=None):
        self.summary_type = summary_type
        self.detail_type = detail_type
        self.is_summary = is_summary or (lambda event: True)

    def process(self, events: List[Optional[Event]]) -> List[Event]:
        output: List[Event] = []
        windows: Dict[str, PendingCorrelation] = {}
        dropped = 0

        for event in events:
            if isinstance(event, self.detail_type):
                window = windows.get(event.correlation_key)
                if window is None:
                    logger.debug(f"Dropping detail line for {event.correlation_key}: no open summary")
                    dropped += 1
                    continue
                window.details.append(event)
                continue

            self._close(windows, output)
            if event is None:
                continue
            output.append(event)

            if isinstance(event, self.summary_type) and self.is_summary(event):
                key = event.correlation_key
                windows[key] = PendingCorrelation(key, event, event.timestamp, index=len(output) - 1)

        self._close(windows, output)
        if dropped:
            logger.info(f"Dropped {dropped} detail lines with no open summary")
        return output

    @staticmethod
    def _close(windows: Dict[str, PendingCorrelation], output: List[Event]):
        for window in windows.values():
            if window.details:
                output[window.index] = window.event.with_details(window.details)
        windows.clear()

"""
SCUM Feed - Source and Cursor Models
"""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

WEBHOOK_URL_RE = re.compile(
    r'^https://(?:\w+\.)?discord(?:app)?\.com/api/(?:v\d+/)?webhooks/(?P<id>\d+)/(?P<token>[\w.-]+)/?$'
)


@dataclass(frozen=True)
class SinkChannel:
    """Discord webhook a Source delivers its events to"""
    webhook_id: int
    token: str

    @classmethod
    def from_url(cls, url: str) -> 'SinkChannel':
        match = WEBHOOK_URL_RE.match(url.strip())
        if not match:
            raise ValueError(f"Not a Discord webhook URL: {url!r}")
        return cls(int(match.group('id')), match.group('token'))


@dataclass(frozen=True)
class Source:
    """One monitored log category on one server"""
    name: str
    directory: Path
    pattern: str
    encoding: str = 'utf-16'
    enabled: bool = True
    channel: Optional[SinkChannel] = None
    suppress: FrozenSet[str] = field(default_factory=frozenset)
    poll_interval: float = 10.0


@dataclass(frozen=True)
class Cursor:
    """
    Read position of a Source
    - current_file: absolute path of the file being tracked
    - last_line: count of complete lines already consumed from it
    - fresh: no position was ever recorded for this Source
    """
    source: str
    current_file: Optional[str] = None
    last_line: int = 0
    last_update: Optional[datetime] = None
    fresh: bool = True

    def advance(self, current_file: str, last_line: int) -> 'Cursor':
        return replace(
            self,
            current_file=current_file,
            last_line=last_line,
            last_update=datetime.now(timezone.utc),
            fresh=False,
        )

    def reset(self) -> 'Cursor':
        """Forget the tracked file; the next file found is read from its start"""
        return replace(self, current_file=None, last_line=0, last_update=datetime.now(timezone.utc))

    def position(self):
        return (self.current_file, self.last_line, self.fresh)

    def to_record(self) -> Dict[str, Any]:
        return {
            'CurrentFile': self.current_file,
            'LastLineNumber': self.last_line,
            'LastUpdate': self.last_update.isoformat() if self.last_update else None,
        }

    @classmethod
    def from_record(cls, source: str, record: Dict[str, Any]) -> 'Cursor':
        last_update = record.get('LastUpdate')
        if isinstance(last_update, str):
            last_update = datetime.fromisoformat(last_update)
        if isinstance(last_update, datetime) and last_update.tzinfo is None:
            last_update = last_update.replace(tzinfo=timezone.utc)

        return cls(
            source=source,
            current_file=record.get('CurrentFile') or None,
            last_line=max(0, int(record.get('LastLineNumber') or 0)),
            last_update=last_update,
            fresh=False,
        )

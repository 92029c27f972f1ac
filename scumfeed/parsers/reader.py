"""
SCUM Feed - Incremental Reader
Returns the lines appended to a Source's log since its Cursor
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import aiofiles

from ..models.source import Cursor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawLine:
    """One decoded log line and its 1-based position in the file"""
    number: int
    text: str


@dataclass(frozen=True)
class ReadBatch:
    lines: List[RawLine] = field(default_factory=list)
    cursor: Optional[Cursor] = None
    rotated: bool = False


def complete_lines(text: str) -> List[str]:
    """Split decoded text into lines, leaving out a trailing line still being written"""
    if text.startswith('\ufeff'):
        text = text[1:]
    if not text:
        return []

    lines = text.split('\n')
    # The part after the last newline is incomplete (or empty)
    lines.pop()
    return [line.rstrip('\r') for line in lines]


class IncrementalReader:
    """
    INCREMENTAL READER
    - First activation: tail from the current end, nothing is replayed
    - Different file than the Cursor tracks: rotation, read from line 0
    - Same file: only lines beyond the Cursor's count
    - Same file but shorter than the count: rewritten in place, read from 0
    - Access or decode failures mean "no new lines" this tick
    """

    def __init__(self, encoding: str = 'utf-16'):
        self.encoding = encoding

    async def _read_text(self, path: Path) -> Optional[str]:
        try:
            async with aiofiles.open(path, 'rb') as f:
                data = await f.read()
        except OSError as e:
            logger.warning(f"Failed to read {path}: {e}")
            return None

        if self.encoding.lower().replace('-', '').startswith('utf16') and len(data) % 2:
            # Half of a code unit from a write in progress
            data = data[:-1]

        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            # Usually a write in progress cut a character in half
            logger.warning(f"Failed to decode {path} as {self.encoding}: {e}")
            return None

    async def read(self, cursor: Cursor, path: Path) -> Optional[ReadBatch]:
        text = await self._read_text(path)
        if text is None:
            return None

        lines = complete_lines(text)
        total = len(lines)
        tracked = str(path)
        rotated = False

        if cursor.current_file == tracked:
            if total < cursor.last_line:
                logger.warning(f"[{cursor.source}] {path.name} shrank from {cursor.last_line} to {total} lines, re-reading from start")
                start = 0
                rotated = True
            else:
                start = cursor.last_line
        elif cursor.current_file is None and cursor.fresh:
            logger.info(f"[{cursor.source}] First activation, tailing {path.name} from line {total}")
            start = total
        else:
            if cursor.current_file is not None:
                logger.info(f"[{cursor.source}] Log rotated: {Path(cursor.current_file).name} -> {path.name}")
                rotated = True
            start = 0

        new_lines = [RawLine(number, line) for number, line in enumerate(lines[start:], start=start + 1)]
        return ReadBatch(new_lines, cursor.advance(tracked, total), rotated)

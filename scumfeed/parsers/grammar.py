"""
SCUM Feed - Grammar Engine
Ordered regex rules turning one raw log line into one typed event
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Pattern

from ..models.events import Event, Location, Number

logger = logging.getLogger(__name__)

# Optional "2025.07.19-18.35.44:" prefix carried by every SCUM log line
TIMESTAMP_PREFIX = r'^(?:(?P<ts>\d{4}\.\d{2}\.\d{2}-\d{2}\.\d{2}\.\d{2})(?::\d{3})?:\s*)?'


def parse_timestamp(timestamp_str: Optional[str]) -> datetime:
    """Parse a SCUM log timestamp; current time when absent or malformed"""
    if timestamp_str:
        try:
            return datetime.strptime(timestamp_str, '%Y.%m.%d-%H.%M.%S').replace(tzinfo=timezone.utc)
        except ValueError:
            logger.debug(f"Unparseable timestamp: {timestamp_str}")
    return datetime.now(timezone.utc)


def parse_number(raw: Optional[str]) -> Optional[Number]:
    """Float when the text converts, otherwise the raw text"""
    if raw is None:
        return None
    text = raw.strip().rstrip(',.')
    try:
        return float(text.replace(',', ''))
    except ValueError:
        return raw.strip()


def parse_location(x: Optional[str], y: Optional[str], z: Optional[str]) -> Optional[Location]:
    if x is None or y is None or z is None:
        return None
    return Location(parse_number(x), parse_number(y), parse_number(z))


@dataclass(frozen=True)
class LineContext:
    """Header fields every builder copies into the event it creates"""
    timestamp: datetime
    category: str
    raw_line: str

    def header(self) -> Dict[str, Any]:
        return {'timestamp': self.timestamp, 'category': self.category, 'raw_line': self.raw_line}


Builder = Callable[[Any, LineContext], Event]


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: Pattern
    build: Builder


def rule(name: str, pattern: str, build: Builder, flags: int = 0) -> Rule:
    """Compile a rule whose pattern follows the optional timestamp prefix"""
    return Rule(name, re.compile(TIMESTAMP_PREFIX + pattern, flags), build)


class Grammar:
    """
    GRAMMAR (one per category)
    - Rules are tried in declaration order, first match wins
    - A line no rule matches is skipped silently
    - A line whose fields fail to build is dropped on its own
    """

    def __init__(self, category: str, rules: List[Rule]):
        self.category = category
        self.rules = list(rules)

    def parse(self, line) -> Optional[Event]:
        text = line.text.strip()
        if not text:
            return None

        for candidate in self.rules:
            match = candidate.pattern.search(text)
            if not match:
                continue

            context = LineContext(parse_timestamp(match.group('ts')), self.category, text)
            try:
                return candidate.build(match, context)
            except (ValueError, TypeError, KeyError, IndexError) as e:
                logger.warning(f"[{self.category}] Rule {candidate.name} failed on line {line.number}: {e}")
                return None

        if len(text) > 20:
            logger.debug(f"[{self.category}] Unmatched line {line.number}: {text[:100]}")
        return None

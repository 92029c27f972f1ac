"""
SCUM Feed - Log Categories
File pattern, grammar and correlation strategy of every SCUM log category
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict

from ..errors import SourceInitError
from ..models.events import EconomyTransaction, FameDetail, FamePointsAward, FinancialStateMarker
from ..models.source import Source
from .correlator import BeforeAfterCorrelator, Correlator, SummaryDetailCorrelator
from .grammar import Grammar
from .grammars import (
    admin, chests, economy, event_kills, fame, kills, logins, quests,
    raid_protection, vehicles, violations,
)
from .pipeline import LogPipeline

logger = logging.getLogger(__name__)

# Seconds between a Before and an After balance line of one trade
ECONOMY_WINDOW_SECONDS = 5.0


@dataclass(frozen=True)
class Category:
    name: str
    pattern: str
    grammar: Grammar
    correlator_factory: Callable[[], Correlator] = Correlator


def economy_correlator() -> Correlator:
    return BeforeAfterCorrelator(FinancialStateMarker, EconomyTransaction, ECONOMY_WINDOW_SECONDS)


def fame_correlator() -> Correlator:
    return SummaryDetailCorrelator(FamePointsAward, FameDetail, is_summary=lambda event: event.periodic)


CATEGORIES: Dict[str, Category] = {category.name: category for category in (
    Category('kills', 'kill_*.log', kills.GRAMMAR),
    Category('admin', 'admin_*.log', admin.GRAMMAR),
    Category('vehicles', 'vehicle_destruction_*.log', vehicles.GRAMMAR),
    Category('economy', 'economy_*.log', economy.GRAMMAR, economy_correlator),
    Category('violations', 'violations_*.log', violations.GRAMMAR),
    Category('fame', 'famepoints_*.log', fame.GRAMMAR, fame_correlator),
    Category('chests', 'chest_ownership_*.log', chests.GRAMMAR),
    Category('logins', 'login_*.log', logins.GRAMMAR),
    Category('quests', 'quests_*.log', quests.GRAMMAR),
    Category('raid_protection', 'raid_protection_*.log', raid_protection.GRAMMAR),
    Category('event_kills', 'event_kill_*.log', event_kills.GRAMMAR),
)}


def build_pipeline(source: Source, store, dispatcher) -> LogPipeline:
    """
    Build the pipeline of a Source

    Raises SourceInitError when the Source cannot run at all
    """
    category = CATEGORIES.get(source.name)
    if category is None:
        raise SourceInitError(f"unknown log category '{source.name}'")
    if not source.enabled:
        raise SourceInitError("category disabled")
    if source.channel is None:
        raise SourceInitError("no webhook configured")
    if not Path(source.directory).is_dir():
        raise SourceInitError(f"log directory not found: {source.directory}")

    return LogPipeline(source, category.grammar, category.correlator_factory(), store, dispatcher)

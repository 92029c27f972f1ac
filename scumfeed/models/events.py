"""
SCUM Feed - Event Models
Typed events produced by the category grammars
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import ClassVar, Optional, Tuple, Union

# A parsed numeric value, or the raw text when conversion failed
Number = Union[float, str]


@dataclass(frozen=True)
class Location:
    """World position as logged by the server (centimetres)"""
    x: Number
    y: Number
    z: Number

    @property
    def is_numeric(self) -> bool:
        return all(isinstance(v, float) for v in (self.x, self.y, self.z))

    def __str__(self) -> str:
        if self.is_numeric:
            return f"X={self.x:.0f} Y={self.y:.0f} Z={self.z:.0f}"
        return f"X={self.x} Y={self.y} Z={self.z}"


@dataclass(frozen=True)
class Balance:
    """Player and trader funds captured by a financial-state line"""
    cash: Number
    account: Number
    gold: Number
    trader_funds: Optional[Number] = None


@dataclass(frozen=True)
class Event:
    """Common header shared by every event variant"""
    timestamp: datetime
    category: str
    raw_line: str

    kind: ClassVar[str] = 'event'

    @property
    def correlation_key(self) -> Optional[str]:
        return None

    @property
    def summary(self) -> str:
        return self.raw_line


# COMBAT EVENTS

@dataclass(frozen=True)
class Kill(Event):
    victim_name: str
    victim_id: str
    killer_name: str
    killer_id: str
    weapon_id: str = ''
    weapon_name: str = 'Unknown'
    weapon_type: str = ''
    distance: Optional[Number] = None
    killer_location: Optional[Location] = None
    victim_location: Optional[Location] = None

    kind: ClassVar[str] = 'kill'

    @property
    def summary(self) -> str:
        text = f"{self.killer_name} killed {self.victim_name} with {self.weapon_name}"
        if self.distance is not None:
            text += f" ({self.distance} m)"
        return text


@dataclass(frozen=True)
class Suicide(Event):
    victim_name: str
    victim_id: str
    weapon_id: str = ''
    weapon_name: str = 'Suicide'
    weapon_type: str = ''
    location: Optional[Location] = None

    kind: ClassVar[str] = 'suicide'

    @property
    def summary(self) -> str:
        return f"{self.victim_name} died by their own hand ({self.weapon_name})"


@dataclass(frozen=True)
class EventKill(Event):
    """Kill scored inside a server-run event (arena, CTF, ...)"""
    killer_name: str
    killer_id: str
    victim_name: str
    victim_id: str
    event_name: str = ''
    weapon_id: str = ''
    weapon_name: str = 'Unknown'
    weapon_type: str = ''
    distance: Optional[Number] = None

    kind: ClassVar[str] = 'event_kill'

    @property
    def summary(self) -> str:
        return f"[{self.event_name}] {self.killer_name} killed {self.victim_name} with {self.weapon_name}"


# ADMINISTRATION

@dataclass(frozen=True)
class AdminCommand(Event):
    admin_id: str
    admin_name: str
    command: str
    arguments: str = ''
    custom: bool = False

    kind: ClassVar[str] = 'admin_command'

    @property
    def summary(self) -> str:
        return f"{self.admin_name} ran #{self.command} {self.arguments}".rstrip()


@dataclass(frozen=True)
class Violation(Event):
    violation: str
    player_id: str
    player_name: Optional[str] = None
    reason: str = ''
    weapon: str = ''
    value: Optional[Number] = None
    expected: Optional[Number] = None

    kind: ClassVar[str] = 'violation'

    @property
    def summary(self) -> str:
        who = self.player_name or self.player_id
        return f"{self.violation} - {who}: {self.reason}".rstrip(': ')


# WORLD EVENTS

@dataclass(frozen=True)
class VehicleLifecycle(Event):
    action: str
    vehicle_class: str
    vehicle_name: str
    vehicle_id: str
    owner_id: Optional[str] = None
    owner_name: Optional[str] = None
    location: Optional[Location] = None

    kind: ClassVar[str] = 'vehicle'

    @property
    def summary(self) -> str:
        owner = self.owner_name or 'no owner'
        return f"{self.vehicle_name} #{self.vehicle_id} {self.action} ({owner})"


@dataclass(frozen=True)
class ChestOwnershipChange(Event):
    chest_id: str
    new_owner_id: str
    new_owner_name: str
    old_owner_id: Optional[str] = None
    old_owner_name: Optional[str] = None
    location: Optional[Location] = None

    kind: ClassVar[str] = 'chest_ownership'

    @property
    def summary(self) -> str:
        old = self.old_owner_name or 'unowned'
        return f"Chest {self.chest_id}: {old} -> {self.new_owner_name}"


@dataclass(frozen=True)
class RaidProtectionChange(Event):
    flag_id: str
    owner_id: str
    state: str
    owner_name: Optional[str] = None
    duration_seconds: Optional[Number] = None

    kind: ClassVar[str] = 'raid_protection'

    @property
    def summary(self) -> str:
        return f"Raid protection {self.state} for flag {self.flag_id}"


# PLAYER EVENTS

@dataclass(frozen=True)
class LoginLogout(Event):
    action: str
    player_name: str
    player_id: str
    ip: str = ''
    drone: bool = False
    location: Optional[Location] = None

    kind: ClassVar[str] = 'login'

    @property
    def summary(self) -> str:
        suffix = ' as drone' if self.drone else ''
        return f"{self.player_name} logged {self.action}{suffix}"


@dataclass(frozen=True)
class QuestOutcome(Event):
    player_name: str
    player_id: str
    quest_id: str
    outcome: str
    location: Optional[Location] = None

    kind: ClassVar[str] = 'quest'

    @property
    def summary(self) -> str:
        return f"{self.player_name} {self.outcome} quest {self.quest_id}"


# ECONOMY EVENTS

@dataclass(frozen=True)
class EconomyTransaction(Event):
    action: str
    player_name: str
    player_id: str
    amount: Number
    currency: str = 'money'
    item: str = ''
    quantity: Optional[Number] = None
    counterparty: str = ''
    received: Optional[Number] = None
    received_currency: str = ''
    balance_before: Optional[Balance] = None
    balance_after: Optional[Balance] = None

    kind: ClassVar[str] = 'economy'

    @property
    def correlation_key(self) -> Optional[str]:
        return f"{self.category}:{self.player_id}"

    @property
    def enriched(self) -> bool:
        return self.balance_before is not None and self.balance_after is not None

    def with_balances(self, before: Balance, after: Balance) -> 'EconomyTransaction':
        return replace(self, balance_before=before, balance_after=after)

    @property
    def summary(self) -> str:
        what = f" {self.item}" if self.item else ''
        return f"{self.player_name} {self.action}{what} for {self.amount} {self.currency}"


@dataclass(frozen=True)
class FinancialStateMarker(Event):
    """Before/After balance line; consumed by correlation, never dispatched"""
    phase: str
    player_name: str
    player_id: str
    balance: Balance
    trader: str = ''

    kind: ClassVar[str] = 'financial_state'

    @property
    def correlation_key(self) -> Optional[str]:
        return f"{self.category}:{self.player_id}"


# FAME POINTS

@dataclass(frozen=True)
class FameDetail(Event):
    """Per-reason breakdown line of a periodic award; never dispatched alone"""
    player_name: str
    player_id: str
    reason: str
    amount: Number

    kind: ClassVar[str] = 'fame_detail'

    @property
    def correlation_key(self) -> Optional[str]:
        return f"{self.category}:{self.player_id}"


@dataclass(frozen=True)
class FamePointsAward(Event):
    player_name: str
    player_id: str
    amount: Number
    total: Optional[Number] = None
    periodic: bool = False
    interval_minutes: Optional[Number] = None
    reason: str = ''
    details: Tuple[FameDetail, ...] = ()

    kind: ClassVar[str] = 'fame'

    @property
    def correlation_key(self) -> Optional[str]:
        return f"{self.category}:{self.player_id}"

    def with_details(self, details) -> 'FamePointsAward':
        return replace(self, details=tuple(details))

    @property
    def summary(self) -> str:
        if self.periodic:
            return f"{self.player_name} earned {self.amount} fame in {self.interval_minutes} minutes"
        return f"{self.player_name} fame {self.amount} ({self.reason})"


EVENT_TYPES = (
    Kill, Suicide, EventKill, AdminCommand, Violation, VehicleLifecycle,
    ChestOwnershipChange, RaidProtectionChange, LoginLogout, QuestOutcome,
    EconomyTransaction, FinancialStateMarker, FameDetail, FamePointsAward,
)

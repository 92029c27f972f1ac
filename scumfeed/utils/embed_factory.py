"""
SCUM Feed - Embed Factory
Turns pipeline events into themed Discord embeds
"""

import random
from typing import Optional

import discord

from ..models.events import (
    AdminCommand, ChestOwnershipChange, EconomyTransaction, Event, EventKill,
    FamePointsAward, Kill, Location, LoginLogout, QuestOutcome,
    RaidProtectionChange, Suicide, VehicleLifecycle, Violation,
)

FOOTER = "SCUM Feed"

# SCUM world bounds used for the sector grid (A-O, 1-15)
MAP_MIN = -600000.0
MAP_MAX = 600000.0
GRID = 15


def coords_to_sector(x, y) -> str:
    """World X/Y to a map sector such as 'C7'; 'N/A' when not numeric"""
    if x is None or y is None:
        return "N/A"
    try:
        xf = float(x)
        yf = float(y)
    except (TypeError, ValueError):
        return "N/A"

    xf = max(MAP_MIN, min(MAP_MAX, xf))
    yf = max(MAP_MIN, min(MAP_MAX, yf))

    span = MAP_MAX - MAP_MIN
    col = int(((xf - MAP_MIN) / span) * GRID)
    row = int(((MAP_MAX - yf) / span) * GRID)
    col = max(0, min(GRID - 1, col))
    row = max(0, min(GRID - 1, row))

    return f"{chr(ord('A') + col)}{row + 1}"


def format_location(location: Optional[Location]) -> str:
    if location is None:
        return "Unknown"
    sector = coords_to_sector(location.x, location.y)
    if sector == "N/A":
        return str(location)
    return f"Sector {sector}"


def format_number(value) -> str:
    if isinstance(value, float):
        return f"{value:,.0f}" if value.is_integer() else f"{value:,.2f}"
    return str(value) if value is not None else "?"


class EmbedFactory:
    """
    Centralized embed factory for consistent Discord embed styling
    """

    # Color schemes for different event kinds
    COLORS = {
        'kill': 0x00d38a,
        'suicide': 0xff5e5e,
        'event_kill': 0xf97316,
        'admin_command': 0x64748b,
        'violation': 0xFF0000,
        'vehicle': 0x95A5A6,
        'chest_ownership': 0xC0A060,
        'raid_protection': 0x2980B9,
        'login': 0x2980B9,
        'logout': 0x8E44AD,
        'quest': 0x2ECC71,
        'economy': 0xFFD700,
        'fame': 0x7f5af0,
        'default': 0x7289DA,
    }

    TITLE_POOLS = {
        'kill': [
            "Silhouette Erased",
            "Hostile Removed",
            "Contact Dismantled",
            "Kill Confirmed",
            "Eyes Off Target"
        ],
        'suicide': [
            "Self-Termination Logged",
            "Manual Override",
            "Exit Chosen"
        ],
        'event_kill': [
            "Arena Kill Logged",
            "Event Score Confirmed"
        ],
        'login': [
            "Connection Established",
            "New Arrival Detected"
        ],
        'logout': [
            "Connection Lost",
            "Departure Recorded"
        ],
        'vehicle': [
            "Asset Lost",
            "Vehicle Written Off"
        ],
        'economy': [
            "Trade Recorded",
            "Ledger Updated",
            "Market Activity"
        ],
        'fame': [
            "Reputation Shift",
            "Fame Ledger"
        ]
    }

    # Combat log message pools
    COMBAT_LOGS = {
        'kill': [
            "Another shadow fades from the island.",
            "The survivor count drops by one.",
            "Territory claimed through violence.",
            "Blood marks another chapter in survival.",
            "The food chain adjusts itself once more."
        ],
        'suicide': [
            "Sometimes the only escape is through the void.",
            "The island claims another volunteer.",
            "Exit strategy: permanent."
        ]
    }

    @classmethod
    def build(cls, event: Event) -> Optional[discord.Embed]:
        """
        Build the embed for an event

        Returns None for event kinds that have no embed
        """
        if event.kind == 'kill':
            return cls._build_kill(event)
        elif event.kind == 'suicide':
            return cls._build_suicide(event)
        elif event.kind == 'event_kill':
            return cls._build_event_kill(event)
        elif event.kind == 'admin_command':
            return cls._build_admin(event)
        elif event.kind == 'violation':
            return cls._build_violation(event)
        elif event.kind == 'vehicle':
            return cls._build_vehicle(event)
        elif event.kind == 'chest_ownership':
            return cls._build_chest(event)
        elif event.kind == 'raid_protection':
            return cls._build_raid_protection(event)
        elif event.kind == 'login':
            return cls._build_login(event)
        elif event.kind == 'quest':
            return cls._build_quest(event)
        elif event.kind == 'economy':
            return cls._build_economy(event)
        elif event.kind == 'fame':
            return cls._build_fame(event)
        return None

    @classmethod
    def _base(cls, event: Event, color_key: str, title: str, description: Optional[str] = None) -> discord.Embed:
        embed = discord.Embed(
            title=title,
            description=description,
            color=cls.COLORS.get(color_key, cls.COLORS['default']),
            timestamp=event.timestamp
        )
        embed.set_footer(text=f"{FOOTER} | {event.category}")
        return embed

    @classmethod
    def _build_kill(cls, event: Kill) -> discord.Embed:
        """Build killfeed embed - themed title, weapon and distance, combat log"""
        title = random.choice(cls.TITLE_POOLS['kill']).upper()
        embed = cls._base(event, 'kill', title, f"**{event.killer_name}**\neliminated\n**{event.victim_name}**")

        weapon_text = f"**Weapon:** {event.weapon_name}"
        if event.weapon_type:
            weapon_text += f" ({event.weapon_type})"
        if event.distance is not None:
            weapon_text += f"\n**From** {format_number(event.distance)} Meters"
        embed.add_field(name="\u200b", value=weapon_text, inline=False)

        if event.victim_location is not None:
            embed.add_field(name="Location", value=format_location(event.victim_location), inline=True)

        embed.add_field(name="\u200b", value=f"*{random.choice(cls.COMBAT_LOGS['kill'])}*", inline=False)
        return embed

    @classmethod
    def _build_suicide(cls, event: Suicide) -> discord.Embed:
        embed = cls._base(event, 'suicide', random.choice(cls.TITLE_POOLS['suicide']))
        embed.add_field(name="Subject", value=event.victim_name, inline=True)
        embed.add_field(name="Cause", value=event.weapon_name, inline=True)
        if event.location is not None:
            embed.add_field(name="Location", value=format_location(event.location), inline=True)
        embed.add_field(name="Combat Log", value=random.choice(cls.COMBAT_LOGS['suicide']), inline=False)
        return embed

    @classmethod
    def _build_event_kill(cls, event: EventKill) -> discord.Embed:
        title = random.choice(cls.TITLE_POOLS['event_kill'])
        embed = cls._base(event, 'event_kill', title, f"**{event.killer_name}** eliminated **{event.victim_name}**")
        embed.add_field(name="Event", value=event.event_name or "Unknown", inline=True)
        embed.add_field(name="Weapon", value=event.weapon_name, inline=True)
        if event.distance is not None:
            embed.add_field(name="Distance", value=f"{format_number(event.distance)} m", inline=True)
        return embed

    @classmethod
    def _build_admin(cls, event: AdminCommand) -> discord.Embed:
        title = "Custom Admin Command" if event.custom else "Admin Command"
        embed = cls._base(event, 'admin_command', title)
        embed.add_field(name="Admin", value=f"{event.admin_name} ({event.admin_id})", inline=True)
        embed.add_field(name="Command", value=f"`#{event.command}`", inline=True)
        if event.arguments:
            embed.add_field(name="Arguments", value=f"`{event.arguments[:1000]}`", inline=False)
        return embed

    @classmethod
    def _build_violation(cls, event: Violation) -> discord.Embed:
        title = event.violation.replace('_', ' ').title()
        embed = cls._base(event, 'violation', title)
        embed.add_field(name="Player", value=event.player_name or event.player_id, inline=True)
        embed.add_field(name="Steam ID", value=event.player_id, inline=True)
        if event.weapon:
            embed.add_field(name="Weapon", value=event.weapon, inline=True)
        if event.reason:
            embed.add_field(name="Reason", value=event.reason, inline=False)
        return embed

    @classmethod
    def _build_vehicle(cls, event: VehicleLifecycle) -> discord.Embed:
        title = random.choice(cls.TITLE_POOLS['vehicle'])
        embed = cls._base(event, 'vehicle', title, f"**{event.vehicle_name}** #{event.vehicle_id}")
        embed.add_field(name="Status", value=event.action, inline=True)
        embed.add_field(name="Owner", value=event.owner_name or "None", inline=True)
        if event.location is not None:
            embed.add_field(name="Location", value=format_location(event.location), inline=True)
        return embed

    @classmethod
    def _build_chest(cls, event: ChestOwnershipChange) -> discord.Embed:
        embed = cls._base(event, 'chest_ownership', "Chest Ownership Changed", f"Chest `{event.chest_id}`")
        embed.add_field(name="Previous Owner", value=event.old_owner_name or "Unowned", inline=True)
        embed.add_field(name="New Owner", value=event.new_owner_name, inline=True)
        if event.location is not None:
            embed.add_field(name="Location", value=format_location(event.location), inline=True)
        return embed

    @classmethod
    def _build_raid_protection(cls, event: RaidProtectionChange) -> discord.Embed:
        embed = cls._base(event, 'raid_protection', f"Raid Protection {event.state.title()}")
        embed.add_field(name="Flag", value=event.flag_id, inline=True)
        embed.add_field(name="Owner", value=event.owner_name or event.owner_id, inline=True)
        if event.duration_seconds is not None:
            embed.add_field(name="Duration", value=f"{format_number(event.duration_seconds)} s", inline=True)
        return embed

    @classmethod
    def _build_login(cls, event: LoginLogout) -> discord.Embed:
        pool = 'login' if event.action == 'in' else 'logout'
        title = random.choice(cls.TITLE_POOLS[pool])
        embed = cls._base(event, pool, title, f"**{event.player_name}** logged {event.action}")
        if event.drone:
            embed.add_field(name="Mode", value="Drone", inline=True)
        if event.location is not None:
            embed.add_field(name="Location", value=format_location(event.location), inline=True)
        return embed

    @classmethod
    def _build_quest(cls, event: QuestOutcome) -> discord.Embed:
        embed = cls._base(event, 'quest', f"Quest {event.outcome.title()}", f"**{event.player_name}**")
        embed.add_field(name="Quest", value=event.quest_id, inline=True)
        return embed

    @classmethod
    def _build_economy(cls, event: EconomyTransaction) -> discord.Embed:
        title = random.choice(cls.TITLE_POOLS['economy'])
        embed = cls._base(event, 'economy', title, f"**{event.player_name}** {event.action}")

        if event.item:
            item = event.item
            if event.quantity is not None:
                item += f" x{format_number(event.quantity)}"
            embed.add_field(name="Item", value=item, inline=True)
        embed.add_field(name="Amount", value=f"{format_number(event.amount)} {event.currency}", inline=True)
        if event.received is not None:
            embed.add_field(name="Received", value=f"{format_number(event.received)} {event.received_currency}", inline=True)
        if event.counterparty:
            embed.add_field(name="With", value=event.counterparty, inline=True)

        if event.enriched:
            before, after = event.balance_before, event.balance_after
            embed.add_field(
                name="Balance",
                value=(f"Cash: {format_number(before.cash)} → {format_number(after.cash)}\n"
                       f"Account: {format_number(before.account)} → {format_number(after.account)}\n"
                       f"Gold: {format_number(before.gold)} → {format_number(after.gold)}"),
                inline=False
            )
        return embed

    @classmethod
    def _build_fame(cls, event: FamePointsAward) -> discord.Embed:
        title = random.choice(cls.TITLE_POOLS['fame'])
        embed = cls._base(event, 'fame', title, f"**{event.player_name}**")
        embed.add_field(name="Fame", value=format_number(event.amount), inline=True)
        if event.total is not None:
            embed.add_field(name="Total", value=format_number(event.total), inline=True)
        if event.periodic and event.interval_minutes is not None:
            embed.add_field(name="Period", value=f"{format_number(event.interval_minutes)} min", inline=True)
        if event.reason:
            embed.add_field(name="Reason", value=event.reason, inline=False)
        if event.details:
            lines = [f"{detail.reason}: {format_number(detail.amount)}" for detail in event.details[:15]]
            embed.add_field(name="Breakdown", value="\n".join(lines), inline=False)
        return embed

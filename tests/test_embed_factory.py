from datetime import datetime, timezone

import discord
import pytest

from scumfeed.models.events import (
    Balance, EconomyTransaction, FameDetail, FamePointsAward, FinancialStateMarker, Kill, Location,
)
from scumfeed.utils.embed_factory import EmbedFactory, coords_to_sector, format_location

NOW = datetime(2025, 7, 19, 18, 35, 44, tzinfo=timezone.utc)


def test_kill_embed():
    kill = Kill(
        timestamp=NOW, category="kills", raw_line="x",
        victim_name="Urrgence", victim_id="1", killer_name="Slang", killer_id="2",
        weapon_name="AS Val", weapon_type="Projectile", distance=17.62,
        victim_location=Location(-46187.92, -320285.81, 16447.89),
    )

    embed = EmbedFactory.build(kill)

    assert isinstance(embed, discord.Embed)
    assert embed.title in [title.upper() for title in EmbedFactory.TITLE_POOLS["kill"]]
    assert "Slang" in embed.description and "Urrgence" in embed.description
    assert "AS Val" in embed.fields[0].value
    assert "17.62" in embed.fields[0].value
    assert embed.timestamp == NOW


def test_fame_embed_lists_breakdown():
    detail = FameDetail(timestamp=NOW, category="fame", raw_line="d", player_name="Z", player_id="1",
                        reason="KillClaimed", amount=50.0)
    award = FamePointsAward(timestamp=NOW, category="fame", raw_line="a", player_name="Z", player_id="1",
                            amount=1611.960938, total=1611.960938, periodic=True, interval_minutes=10.0,
                            details=(detail,))

    embed = EmbedFactory.build(award)

    breakdown = [field for field in embed.fields if field.name == "Breakdown"]
    assert breakdown and "KillClaimed: 50" in breakdown[0].value


def test_economy_embed_shows_balances_only_when_enriched():
    trade = EconomyTransaction(timestamp=NOW, category="economy", raw_line="t", action="sold",
                               player_name="Z", player_id="1", amount=22.0, item="1H_ImprovisedKnife")

    assert not any(field.name == "Balance" for field in EmbedFactory.build(trade).fields)

    enriched = trade.with_balances(Balance(100.0, 0.0, 0.0), Balance(122.0, 0.0, 0.0))
    balance = [field for field in EmbedFactory.build(enriched).fields if field.name == "Balance"]
    assert "100 → 122" in balance[0].value


def test_internal_events_have_no_embed():
    marker = FinancialStateMarker(timestamp=NOW, category="economy", raw_line="m", phase="Before",
                                  player_name="Z", player_id="1", balance=Balance(1.0, 2.0, 3.0))

    assert EmbedFactory.build(marker) is None


@pytest.mark.parametrize("x,y,sector", [
    (-600000, 600000, "A1"),
    (600000, -600000, "O15"),
    (0, 0, "H8"),
    (-900000, 900000, "A1"),
    ("n/a", 0, "N/A"),
    (None, 0, "N/A"),
])
def test_coords_to_sector(x, y, sector):
    assert coords_to_sector(x, y) == sector


def test_format_location_falls_back_to_raw_text():
    assert format_location(Location(0.0, 0.0, 0.0)) == "Sector H8"
    assert format_location(Location("bad", 1.0, 2.0)) == "X=bad Y=1.0 Z=2.0"
    assert format_location(None) == "Unknown"

import asyncio
from datetime import datetime, timezone

import discord

from scumfeed.models.events import FameDetail, Kill
from scumfeed.parsers.dispatcher import Dispatcher

from conftest import CHANNEL, FakeNotifier

KILL = Kill(
    timestamp=datetime(2025, 7, 19, 18, 35, 44, tzinfo=timezone.utc), category="kills", raw_line="kill",
    victim_name="Urrgence", victim_id="1", killer_name="Slang", killer_id="2",
    weapon_id="AS_Val", weapon_name="AS Val", weapon_type="Projectile", distance=17.62,
)


def test_delivers_embed_to_source_channel(make_source, notifier):
    delivered = asyncio.run(Dispatcher(notifier).dispatch(KILL, make_source()))

    assert delivered
    channel, embed = notifier.sent[0]
    assert channel == CHANNEL
    assert isinstance(embed, discord.Embed)


def test_missing_sink_is_not_an_error(make_source):
    assert asyncio.run(Dispatcher(None).dispatch(KILL, make_source())) is False


def test_source_without_channel(make_source, notifier):
    assert asyncio.run(Dispatcher(notifier).dispatch(KILL, make_source(channel=None))) is False
    assert notifier.sent == []


def test_failing_sink_is_swallowed(make_source):
    assert asyncio.run(Dispatcher(FakeNotifier(fail=True)).dispatch(KILL, make_source())) is False


def test_slow_sink_times_out(make_source):
    slow = FakeNotifier(delay=1.0)

    assert asyncio.run(Dispatcher(slow, timeout=0.05).dispatch(KILL, make_source())) is False
    assert slow.sent == []


def test_suppressed_kind_is_not_sent(make_source, notifier):
    source = make_source(suppress=frozenset({"kill"}))

    assert asyncio.run(Dispatcher(notifier).dispatch(KILL, source)) is False
    assert notifier.sent == []


def test_kind_without_embed_is_not_sent(make_source, notifier):
    fame_detail = FameDetail(
        timestamp=KILL.timestamp, category="fame", raw_line="detail",
        player_name="Zeltaon", player_id="1", reason="KillClaimed", amount=5.0,
    )

    assert asyncio.run(Dispatcher(notifier).dispatch(fame_detail, make_source())) is False
    assert notifier.sent == []


def test_formatter_error_is_swallowed(make_source, notifier):
    class BrokenFormatter:
        @staticmethod
        def build(event):
            raise RuntimeError("template missing")

    assert asyncio.run(Dispatcher(notifier, formatter=BrokenFormatter).dispatch(KILL, make_source())) is False

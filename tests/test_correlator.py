import logging
from datetime import datetime, timedelta, timezone

from scumfeed.models.events import (
    Balance, EconomyTransaction, FameDetail, FamePointsAward, FinancialStateMarker, Kill,
)
from scumfeed.parsers.categories import economy_correlator, fame_correlator
from scumfeed.parsers.correlator import Correlator

T0 = datetime(2025, 7, 19, 18, 0, 0, tzinfo=timezone.utc)
ZELTAON = "76561198212603353"
OTHER = "76561198000000001"


def at(seconds):
    return T0 + timedelta(seconds=seconds)


def trade(seconds, player_id=ZELTAON, amount=22.0):
    return EconomyTransaction(
        timestamp=at(seconds), category="economy", raw_line="trade",
        action="sold", player_name="Zeltaon", player_id=player_id, amount=amount,
    )


def marker(seconds, phase, cash, player_id=ZELTAON):
    return FinancialStateMarker(
        timestamp=at(seconds), category="economy", raw_line=phase,
        phase=phase, player_name="Zeltaon", player_id=player_id,
        balance=Balance(cash=cash, account=0.0, gold=0.0, trader_funds=1000.0),
    )


def award(seconds, player_id=ZELTAON):
    return FamePointsAward(
        timestamp=at(seconds), category="fame", raw_line="award",
        player_name="Zeltaon", player_id=player_id, amount=100.0, total=500.0,
        periodic=True, interval_minutes=10.0,
    )


def detail(seconds, reason, player_id=ZELTAON):
    return FameDetail(
        timestamp=at(seconds), category="fame", raw_line=reason,
        player_name="Zeltaon", player_id=player_id, reason=reason, amount=10.0,
    )


def test_pass_through_keeps_every_event():
    events = [trade(0), trade(1)]
    assert Correlator().process(events) == events


def test_after_within_window_enriches_transaction():
    correlator = economy_correlator()

    output = correlator.process([marker(0, "Before", 100.0), trade(1), marker(2, "After", 122.0)])

    assert len(output) == 1
    assert output[0].enriched
    assert output[0].balance_before.cash == 100.0
    assert output[0].balance_after.cash == 122.0
    assert correlator.pending_count == 0


def test_after_outside_window_leaves_transaction_alone():
    correlator = economy_correlator()

    output = correlator.process([marker(0, "Before", 100.0), trade(1), marker(10, "After", 122.0)])

    assert len(output) == 1
    assert not output[0].enriched
    assert output[0].balance_before is None


def test_before_marker_survives_into_next_batch():
    correlator = economy_correlator()

    assert correlator.process([marker(0, "Before", 100.0)]) == []
    assert correlator.pending_count == 1

    output = correlator.process([trade(1), marker(2, "After", 122.0)])

    assert output[0].enriched


def test_unanswered_before_marker_expires():
    correlator = economy_correlator()

    correlator.process([marker(0, "Before", 100.0)])
    correlator.process([trade(30)])

    assert correlator.pending_count == 0


def test_enrichment_targets_most_recent_transaction_of_same_key():
    correlator = economy_correlator()
    first = trade(0, amount=1.0)

    output = correlator.process([
        first,
        marker(1, "Before", 100.0),
        trade(2, player_id=OTHER),
        trade(2, amount=2.0),
        marker(3, "After", 102.0),
    ])

    assert [event.enriched for event in output] == [False, False, True]
    assert output[2].amount == 2.0
    assert output[1].player_id == OTHER


def test_after_without_before_is_ignored():
    output = economy_correlator().process([trade(0), marker(1, "After", 10.0)])

    assert len(output) == 1
    assert not output[0].enriched


def test_summary_collects_its_details():
    output = fame_correlator().process([
        award(0),
        detail(0, "KillClaimed"),
        detail(0, "Crafting"),
        detail(0, "Looting"),
        detail(0, "Fishing", player_id=OTHER),
    ])

    assert len(output) == 1
    assert [d.reason for d in output[0].details] == ["KillClaimed", "Crafting", "Looting"]


def test_non_detail_line_closes_window():
    penalty = FamePointsAward(
        timestamp=at(1), category="fame", raw_line="penalty",
        player_name="Zeltaon", player_id=ZELTAON, amount=-5.0, reason="Death",
    )

    output = fame_correlator().process([
        award(0),
        detail(0, "KillClaimed"),
        penalty,
        detail(1, "Late"),
    ])

    assert len(output) == 2
    assert [d.reason for d in output[0].details] == ["KillClaimed"]
    assert output[1] is penalty


def test_unmatched_line_closes_window():
    output = fame_correlator().process([
        award(0),
        detail(0, "A"),
        None,
        detail(0, "B"),
    ])

    assert len(output) == 1
    assert [d.reason for d in output[0].details] == ["A"]


def test_unmatched_lines_are_ignored_by_other_strategies():
    assert Correlator().process([None, trade(0), None]) == [trade(0)]

    output = economy_correlator().process([marker(0, "Before", 100.0), None, trade(1), None, marker(2, "After", 122.0)])

    assert len(output) == 1
    assert output[0].enriched


def test_dropped_details_are_counted(caplog):
    caplog.set_level(logging.INFO, logger="scumfeed.parsers.correlator")

    fame_correlator().process([detail(0, "Orphan"), detail(0, "Another")])

    assert "Dropped 2 detail lines" in caplog.text


def test_new_summary_of_same_key_starts_new_window():
    output = fame_correlator().process([
        award(0), detail(0, "A"),
        award(600), detail(600, "B"), detail(600, "C"),
    ])

    assert [len(event.details) for event in output] == [1, 2]


def test_detail_without_summary_is_dropped():
    assert fame_correlator().process([detail(0, "Orphan")]) == []


def test_other_events_pass_through_strategies():
    kill = Kill(timestamp=T0, category="economy", raw_line="x", victim_name="a", victim_id="1",
                killer_name="b", killer_id="2")

    assert economy_correlator().process([kill]) == [kill]
    assert fame_correlator().process([kill]) == [kill]

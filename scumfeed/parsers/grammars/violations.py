"""
SCUM Feed - Violations Log Grammar
Kicks, bans and anti-cheat detections
"""

from ...models.events import Violation
from ..grammar import Grammar, parse_number, rule
from .common import player

CATEGORY = 'violations'


def build_kick(match, context):
    return Violation(
        **context.header(),
        violation='kick',
        player_id=match.group('player_id'),
        reason=(match.group('reason') or '').strip(),
    )


def build_ban(match, context):
    return Violation(
        **context.header(),
        violation='ban',
        player_id=match.group('player_id'),
        reason=(match.group('reason') or '').strip(),
    )


def build_ammo_mismatch(match, context):
    count = parse_number(match.group('count'))
    expected = parse_number(match.group('expected'))
    return Violation(
        **context.header(),
        violation='ammo_mismatch',
        player_id=match.group('player_id'),
        player_name=match.group('player_name').strip(),
        reason=f"ammo count {count} (expected {expected})",
        weapon=match.group('weapon'),
        value=count,
        expected=expected,
    )


def build_interaction_range(match, context):
    distance = parse_number(match.group('distance'))
    return Violation(
        **context.header(),
        violation='interaction_range',
        player_id=match.group('player_id'),
        player_name=match.group('player_name').strip(),
        reason=f"interacted with {match.group('target')} at {distance}",
        value=distance,
        expected=parse_number(match.group('limit')) if match.group('limit') else None,
    )


GRAMMAR = Grammar(CATEGORY, [
    rule('kick',
         r"AConZGameMode::KickPlayer: User id: '(?P<player_id>\d+)'(?:, Reason: (?P<reason>.*))?",
         build_kick),
    rule('ban',
         r"AConZGameMode::BanPlayerById: User id: '(?P<player_id>\d+)'(?:, Reason: (?P<reason>.*))?",
         build_ban),
    rule('ammo_mismatch',
         r'\[AmmoCountMismatch\] ' + player('player') + r' Weapon: (?P<weapon>\S+?),?'
         r' Count: (?P<count>[^\s,]+),? Expected: (?P<expected>[^\s,]+)',
         build_ammo_mismatch),
    rule('interaction_range',
         r'\[InteractionRange\] ' + player('player') + r' interacted with (?P<target>\S+)'
         r' at distance (?P<distance>[^\s,]+)(?:,? max(?:imum)? (?P<limit>[^\s,]+))?',
         build_interaction_range),
])

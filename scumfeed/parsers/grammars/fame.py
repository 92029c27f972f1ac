"""
SCUM Feed - Fame Points Log Grammar
Periodic award summaries, their per-reason detail lines and penalties
"""

from ...models.events import FameDetail, FamePointsAward
from ..grammar import Grammar, parse_number, rule
from .common import player

CATEGORY = 'fame'


def build_periodic_award(match, context):
    return FamePointsAward(
        **context.header(),
        player_name=match.group('player_name').strip(),
        player_id=match.group('player_id'),
        amount=parse_number(match.group('amount')),
        total=parse_number(match.group('total')),
        periodic=True,
        interval_minutes=parse_number(match.group('minutes')),
    )


def build_detail(match, context):
    return FameDetail(
        **context.header(),
        player_name=match.group('player_name').strip(),
        player_id=match.group('player_id'),
        reason=match.group('reason').strip(),
        amount=parse_number(match.group('amount')),
    )


def build_penalty(match, context):
    amount = parse_number(match.group('amount'))
    if isinstance(amount, float):
        amount = -abs(amount)
    total = match.group('total')
    return FamePointsAward(
        **context.header(),
        player_name=match.group('player_name').strip(),
        player_id=match.group('player_id'),
        amount=amount,
        total=parse_number(total) if total else None,
        reason=match.group('reason').strip(),
    )


GRAMMAR = Grammar(CATEGORY, [
    # Player Zeltaon(76561198212603353) was awarded 1611.960938 fame points in 10 minutes for a total of 1611.960938
    rule('periodic_award',
         r'Player ' + player('player') + r' was awarded (?P<amount>\S+) fame points in (?P<minutes>\S+)'
         r' minutes for a total of (?P<total>\S+)',
         build_periodic_award),
    rule('award_detail',
         r'Player ' + player('player') + r' received (?P<amount>\S+) fame points for (?P<reason>.+?)\.?$',
         build_detail),
    rule('penalty',
         r'Player ' + player('player') + r' lost (?P<amount>\S+) fame points for (?P<reason>.+?)'
         r'(?:, new total (?:is )?(?P<total>[^\s.]+(?:\.\d+)?))?\.?$',
         build_penalty),
])

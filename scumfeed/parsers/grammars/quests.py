"""
SCUM Feed - Quest Log Grammar
"""

from ...models.events import QuestOutcome
from ..grammar import Grammar, parse_location, rule
from .common import XYZ, player

CATEGORY = 'quests'


def build_outcome(match, context):
    return QuestOutcome(
        **context.header(),
        player_name=match.group('player_name').strip(),
        player_id=match.group('player_id'),
        quest_id=match.group('quest_id'),
        outcome=match.group('outcome').lower(),
        location=parse_location(match.group('x'), match.group('y'), match.group('z')),
    )


GRAMMAR = Grammar(CATEGORY, [
    rule('quest_outcome',
         r'\[LogQuest\] ' + player('player') + r' (?P<outcome>completed|abandoned|failed) quest'
         r' (?P<quest_id>[^\s.]+)\.?(?: at ' + XYZ + r')?',
         build_outcome),
])

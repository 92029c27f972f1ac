"""
SCUM Feed - Event Kill Log Grammar
Kills scored inside server-run events
"""

from ...models.events import EventKill
from ..grammar import Grammar, parse_number, rule
from .common import normalize_weapon, player

CATEGORY = 'event_kills'

EVENT_KILL = (
    r'\[EventKill\] Event: (?P<event_name>[^\s.]+)\.? Killer: ' + player('killer')
    + r',? Victim: ' + player('victim') + r',? Weapon: (?P<weapon>\S+) \[(?P<weapon_type>[^\]]*)\]'
)


def build_event_kill(match, context):
    weapon_id, weapon_name = normalize_weapon(match.group('weapon'))
    distance = match.groupdict().get('distance')
    return EventKill(
        **context.header(),
        event_name=match.group('event_name'),
        killer_name=match.group('killer_name').strip(),
        killer_id=match.group('killer_id'),
        victim_name=match.group('victim_name').strip(),
        victim_id=match.group('victim_id'),
        weapon_id=weapon_id,
        weapon_name=weapon_name,
        weapon_type=match.group('weapon_type'),
        distance=parse_number(distance) if distance else None,
    )


GRAMMAR = Grammar(CATEGORY, [
    rule('with_distance', EVENT_KILL + r',? Distance: (?P<distance>[^\s\]]+) ?m', build_event_kill),
    rule('without_distance', EVENT_KILL, build_event_kill),
])

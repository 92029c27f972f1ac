"""
SCUM Feed - Kill Log Grammar
Parses kill_*.log lines into Kill and Suicide events
"""

from ...models.events import Kill, Suicide
from ..grammar import Grammar, parse_location, parse_number, rule
from .common import COORDS, normalize_weapon, player

CATEGORY = 'kills'

WEAPON = r' Weapon: (?P<weapon>\S+) \[(?P<weapon_type>[^\]]*)\]'
FULL_LOCATIONS = (
    r' S\[KillerLoc ?: ' + COORDS.format('k') + r',? VictimLoc ?: ' + COORDS.format('v')
    + r', Distance: (?P<distance>[^\s\]]+) ?m\]'
)
VICTIM_LOCATION = r' S\[VictimLoc ?: ' + COORDS.format('v') + r'\]'


def _weapon_fields(match):
    weapon_id, weapon_name = normalize_weapon(match.group('weapon'))
    return {
        'weapon_id': weapon_id,
        'weapon_name': weapon_name,
        'weapon_type': match.group('weapon_type') or '',
    }


def _victim_location(match):
    return parse_location(match.group('vx'), match.group('vy'), match.group('vz'))


def _killer_location(match):
    return parse_location(match.group('kx'), match.group('ky'), match.group('kz'))


def build_suicide(match, context):
    fields = {}
    if match.group('weapon'):
        fields = _weapon_fields(match)
    return Suicide(
        **context.header(),
        victim_name=match.group('victim_name').strip(),
        victim_id=match.group('victim_id'),
        location=_victim_location(match),
        **fields
    )


def build_kill(match, context):
    return Kill(
        **context.header(),
        victim_name=match.group('victim_name').strip(),
        victim_id=match.group('victim_id'),
        killer_name=match.group('killer_name').strip(),
        killer_id=match.group('killer_id'),
        distance=parse_number(match.group('distance')),
        killer_location=_killer_location(match),
        victim_location=_victim_location(match),
        **_weapon_fields(match)
    )


def build_explosive_kill(match, context):
    return Kill(
        **context.header(),
        victim_name=match.group('victim_name').strip(),
        victim_id=match.group('victim_id'),
        killer_name=match.group('killer_name').strip(),
        killer_id=match.group('killer_id'),
        victim_location=_victim_location(match),
        **_weapon_fields(match)
    )


def build_weaponless_kill(match, context):
    distance = match.group('distance')
    return Kill(
        **context.header(),
        victim_name=match.group('victim_name').strip(),
        victim_id=match.group('victim_id'),
        killer_name=match.group('killer_name').strip(),
        killer_id=match.group('killer_id'),
        distance=parse_number(distance) if distance else None,
        killer_location=_killer_location(match),
        victim_location=_victim_location(match),
    )


GRAMMAR = Grammar(CATEGORY, [
    # Killer and victim share an id
    rule('suicide',
         r'Died: ' + player('victim') + r', Killer: .+? ?\((?P=victim_id)\)'
         r'(?: Weapon: (?P<weapon>\S+)(?: \[(?P<weapon_type>[^\]]*)\])?)?'
         r'(?: S\[(?:KillerLoc ?: [^\]]*?)?VictimLoc ?: ' + COORDS.format('v') + r')?',
         build_suicide),

    rule('kill',
         r'Died: ' + player('victim') + r', Killer: ' + player('killer') + WEAPON + FULL_LOCATIONS,
         build_kill),

    # Explosions and traps only report where the victim was
    rule('explosive_kill',
         r'Died: ' + player('victim') + r', Killer: ' + player('killer') + WEAPON + VICTIM_LOCATION,
         build_explosive_kill),

    rule('weaponless_kill',
         r'Died: ' + player('victim') + r', Killer: ' + player('killer') + r'(?! Weapon:)'
         r'(?:' + FULL_LOCATIONS + r')?',
         build_weaponless_kill),
])

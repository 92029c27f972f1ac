"""
SCUM Feed - Login Log Grammar
"""

from ...models.events import LoginLogout
from ..grammar import Grammar, parse_location, rule
from .common import XYZ

CATEGORY = 'logins'

# '10.0.0.1 76561198000000000:PlayerName(3)' logged in at: X=... Y=... Z=...
LOGIN = (
    r"'(?P<ip>[\d.]+) (?P<player_id>\d+):(?P<player_name>.+?)\((?P<player_index>\d+)\)'"
    r" logged (?P<action>in|out) at: " + XYZ
)


def build_login(match, context, drone=False):
    return LoginLogout(
        **context.header(),
        action=match.group('action'),
        player_name=match.group('player_name').strip(),
        player_id=match.group('player_id'),
        ip=match.group('ip'),
        drone=drone,
        location=parse_location(match.group('x'), match.group('y'), match.group('z')),
    )


def build_drone_login(match, context):
    return build_login(match, context, drone=True)


GRAMMAR = Grammar(CATEGORY, [
    rule('drone_login', LOGIN + r' \(as drone\)', build_drone_login),
    rule('login', LOGIN, build_login),
])

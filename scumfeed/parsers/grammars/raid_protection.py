"""
SCUM Feed - Raid Protection Log Grammar
"""

from ...models.events import RaidProtectionChange
from ..grammar import Grammar, parse_number, rule

CATEGORY = 'raid_protection'

FLAG = r'for flag (?P<flag_id>\d+) \(owner: (?P<owner_id>\d+)(?:, (?P<owner_name>[^)]+))?\)'


def build_enabled(match, context):
    return RaidProtectionChange(
        **context.header(),
        flag_id=match.group('flag_id'),
        owner_id=match.group('owner_id'),
        owner_name=match.group('owner_name'),
        state='enabled',
        duration_seconds=parse_number(match.group('duration')),
    )


def build_changed(match, context):
    return RaidProtectionChange(
        **context.header(),
        flag_id=match.group('flag_id'),
        owner_id=match.group('owner_id'),
        owner_name=match.group('owner_name'),
        state=match.group('state').lower(),
    )


GRAMMAR = Grammar(CATEGORY, [
    rule('enabled',
         r'\[LogRaidProtection\] Raid protection enabled ' + FLAG + r', duration: (?P<duration>[^\s,]+) seconds',
         build_enabled),
    rule('disabled_or_expired',
         r'\[LogRaidProtection\] Raid protection (?P<state>disabled|expired) ' + FLAG,
         build_changed),
])

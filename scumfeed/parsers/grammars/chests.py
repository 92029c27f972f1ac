"""
SCUM Feed - Chest Ownership Log Grammar
"""

from ...models.events import ChestOwnershipChange
from ..grammar import Grammar, parse_location, rule
from .common import XYZ

CATEGORY = 'chests'

CHEST = r'Chest \(entity id: (?P<chest_id>\d+)\) ownership changed\. '
NEW_OWNER = r'New owner: (?P<new_id>\d+) \((?P<new_index>\d+), (?P<new_name>.+?)\)\.?'
LOCATION = r'(?: Location: ' + XYZ + r')?'


def build_change(match, context):
    return ChestOwnershipChange(
        **context.header(),
        chest_id=match.group('chest_id'),
        new_owner_id=match.group('new_id'),
        new_owner_name=match.group('new_name').strip(),
        old_owner_id=match.group('old_id'),
        old_owner_name=match.group('old_name').strip(),
        location=parse_location(match.group('x'), match.group('y'), match.group('z')),
    )


def build_claim(match, context):
    return ChestOwnershipChange(
        **context.header(),
        chest_id=match.group('chest_id'),
        new_owner_id=match.group('new_id'),
        new_owner_name=match.group('new_name').strip(),
        location=parse_location(match.group('x'), match.group('y'), match.group('z')),
    )


GRAMMAR = Grammar(CATEGORY, [
    rule('ownership_change',
         CHEST + r'Old owner: (?P<old_id>\d+) \((?P<old_index>\d+), (?P<old_name>.+?)\)\. ' + NEW_OWNER + LOCATION,
         build_change),
    rule('unowned_claim', CHEST + r'Old owner: N/A\. ' + NEW_OWNER + LOCATION, build_claim),
])

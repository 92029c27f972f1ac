"""
SCUM Feed - Vehicle Destruction Log Grammar
Destroyed / Disappeared / timer-expired vehicles, with or without an owner
"""

from ...models.events import VehicleLifecycle
from ..grammar import Grammar, parse_location, rule
from .common import XYZ, normalize_vehicle

CATEGORY = 'vehicles'

VEHICLE = r'\[(?P<action>\w+)\] (?P<vehicle>\w+)\. VehicleId: (?P<vehicle_id>\d+)\. '
LOCATION = r'(?: Location: ' + XYZ + r')?'


def build_owned(match, context):
    return VehicleLifecycle(
        **context.header(),
        action=match.group('action'),
        vehicle_class=match.group('vehicle'),
        vehicle_name=normalize_vehicle(match.group('vehicle')),
        vehicle_id=match.group('vehicle_id'),
        owner_id=match.group('owner_id'),
        owner_name=match.group('owner_name').strip(),
        location=parse_location(match.group('x'), match.group('y'), match.group('z')),
    )


def build_ownerless(match, context):
    return VehicleLifecycle(
        **context.header(),
        action=match.group('action'),
        vehicle_class=match.group('vehicle'),
        vehicle_name=normalize_vehicle(match.group('vehicle')),
        vehicle_id=match.group('vehicle_id'),
        location=parse_location(match.group('x'), match.group('y'), match.group('z')),
    )


GRAMMAR = Grammar(CATEGORY, [
    # Owner: 76561198000000000 (3, PlayerName).
    rule('owned',
         VEHICLE + r'Owner: (?P<owner_id>\d+) \((?P<owner_index>\d+), (?P<owner_name>.+?)\)\.' + LOCATION,
         build_owned),
    rule('ownerless', VEHICLE + r'Owner: N/A\.?' + LOCATION, build_ownerless),
])

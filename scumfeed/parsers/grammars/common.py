"""
SCUM Feed - Shared Grammar Fragments
Regex pieces and name normalization used by several categories
"""

import re
from typing import Tuple

# "X=-12.00 Y=3.40 Z=100.0" style location
XYZ = r'X=(?P<x>[^\s,]+) Y=(?P<y>[^\s,]+) Z=(?P<z>[^\s,]+)'

# "-12.00, 3.40, 100.0" style location
COORDS = r'(?P<{0}x>[^\s,]+), (?P<{0}y>[^\s,]+), (?P<{0}z>[^\s,\]]+)'

STEAM_ID = r'\d{17}|\d+'

WEAPON_PREFIXES = ("BPC_Weapon_", "BP_Weapon_", "BPCWeapon_", "BPWeapon_", "Weapon_")
VEHICLE_PREFIXES = ("BPC_", "BP_")

# Display names where the cleaned class name reads badly
WEAPON_NAMES = {
    'AS_Val': 'AS Val',
    'AK47': 'AK-47',
    'AK15': 'AK-15',
    'M16A4': 'M16A4',
    'M1911': 'M1911',
    'SVD_Dragunov': 'SVD Dragunov',
    'MK18': 'MK18',
    'MP5': 'MP5',
    'Compound_Bow': 'Compound Bow',
    'Crossbow': 'Crossbow',
    'Improvised_Shotgun': 'Improvised Shotgun',
    '1H_ImprovisedKnife': 'Improvised Knife',
    '1H_KitchenKnife': 'Kitchen Knife',
    '2H_Baseball_Bat': 'Baseball Bat',
    '2H_Axe': 'Axe',
    'Grenade': 'Grenade',
    'Claymore': 'Claymore',
    'PipeBomb': 'Pipe Bomb',
}

VEHICLE_NAMES = {
    'Dirtbike': 'Dirt Bike',
    'Rager': 'Rager',
    'Laika': 'Laika',
    'WolfsWagen': 'Wolfswagen',
    'Tractor': 'Tractor',
    'Cruiser': 'Cruiser',
    'Kinglet_Duster': 'Kinglet Duster',
    'Kinglet_Mariner': 'Kinglet Mariner',
    'SUP': 'Paddle Board',
    'Barba': 'Barba Boat',
    'Bicycle': 'Bicycle',
    'RIS': 'RIS',
}


def player(role: str) -> str:
    """'Name (76561198000000000)' with named groups <role>_name and <role>_id"""
    return rf'(?P<{role}_name>.+?) ?\((?P<{role}_id>{STEAM_ID})\)'


def strip_class_name(raw: str, prefixes: Tuple[str, ...]) -> str:
    cleaned = raw.strip()
    for prefix in prefixes:
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):]
            break
    if cleaned.endswith('_C'):
        cleaned = cleaned[:-2]
    return cleaned


def normalize_weapon(raw: str) -> Tuple[str, str]:
    """Map a logged weapon class to (weapon_id, display name)

    "Weapon_AS_Val_C" -> ("AS_Val", "AS Val")
    """
    weapon_id = strip_class_name(raw.split('[', 1)[0], WEAPON_PREFIXES)
    if not weapon_id:
        return '', 'Unknown'
    name = WEAPON_NAMES.get(weapon_id) or weapon_id.replace('_', ' ').strip()
    return weapon_id, name


def normalize_vehicle(raw: str) -> str:
    vehicle_id = strip_class_name(raw, VEHICLE_PREFIXES)
    return VEHICLE_NAMES.get(vehicle_id) or vehicle_id.replace('_', ' ').strip() or 'Unknown'


def split_item(raw: str) -> Tuple[str, str]:
    """'1H_ImprovisedKnife (health: 100.00, uses: 0)' -> ('1H_ImprovisedKnife', 'health: 100.00, uses: 0')"""
    match = re.match(r'^(?P<item>[^\s(]+)\s*(?:\((?P<extra>.*)\))?$', raw.strip())
    if not match:
        return raw.strip(), ''
    return match.group('item'), match.group('extra') or ''

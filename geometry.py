from __future__ import annotations
import re

INCHES_TO_PX = 96.0
CM_TO_PX = INCHES_TO_PX / 2.54
MM_TO_PX = CM_TO_PX / 10
PT_TO_PX = INCHES_TO_PX / 72.0
PC_TO_PX = PT_TO_PX * 12
DEFAULT_FONT_SIZE = 16.0

UNIT_FACTORS = {
    '': 1.0,
    'px': 1.0,
    'pt': PT_TO_PX,
    'pc': PC_TO_PX,
    'in': INCHES_TO_PX,
    'cm': CM_TO_PX,
    'mm': MM_TO_PX,
    'em': DEFAULT_FONT_SIZE,
    'ex': DEFAULT_FONT_SIZE / 2,
}

length_pattern = re.compile(r'^([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-zA-Z%]*)$')
coordinate_pattern = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')


def parse_number_with_unit(value) -> tuple[float, str]:
    if isinstance(value, (int, float)):
        return (float(value), "")
    if not value or not isinstance(value, str):
        return (0.0, "")

    match = length_pattern.match(value.strip())
    if match is None:
        return (0.0, "")
    return (float(match.group(1)), match.group(2).lower())


def parse_length(value, reference: float = None, default: float = 0.0) -> float:
    """Length in user units.

    Percentages resolve against `reference` when one is given and are taken
    as plain numbers otherwise. Unknown units are ignored.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default

    number, unit = parse_number_with_unit(value)
    if unit == '%':
        return number / 100.0 * reference if reference is not None else number
    return number * UNIT_FACTORS.get(unit, 1.0)


def format_number(value) -> str:
    if isinstance(value, str):
        return value
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def parse_points(points_str: str) -> list[list[float]]:
    if not points_str:
        return []

    coords = [float(c) for c in coordinate_pattern.findall(points_str)]
    # an odd trailing coordinate is dropped
    return [[coords[i], coords[i + 1]] for i in range(0, len(coords) - 1, 2)]


def serialize_points(points) -> str:
    return ' '.join(f"{format_number(x)},{format_number(y)}" for x, y in points)


def clamp(x, minx, maxx):
    return max(min(x, maxx), minx)

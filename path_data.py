from __future__ import annotations
import math
import re
from typing import List, NamedTuple, Tuple

Point = Tuple[float, float]

token_pattern = re.compile(r'([MmLlHhVvCcSsQqTtAaZz])|([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)')

ARGUMENT_COUNTS = {'M': 2, 'L': 2, 'H': 1, 'V': 1, 'C': 6, 'S': 4, 'Q': 4, 'T': 2, 'A': 7, 'Z': 0}


class Subpath(NamedTuple):
    points: List[Point]
    closed: bool


def tokenize_path_data(path_str: str) -> list[tuple[str, list[float]]]:
    """Split path data into (command, numbers) groups.

    Implicit repetitions stay in a single group; numbers that appear before
    the first command are dropped.
    """
    commands = []
    for match in token_pattern.finditer(path_str or ''):
        command, number = match.groups()
        if command:
            commands.append((command, []))
        elif commands:
            commands[-1][1].append(float(number))
    return commands


def subdivide_cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point,
                           tolerance: float = 0.25) -> List[Point]:
    points = []

    def midpoint(a, b):
        return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)

    def flatness(p0, p1, p2, p3):
        ux = 3 * p1[0] - 2 * p0[0] - p3[0]
        uy = 3 * p1[1] - 2 * p0[1] - p3[1]
        vx = 3 * p2[0] - 2 * p3[0] - p0[0]
        vy = 3 * p2[1] - 2 * p3[1] - p0[1]
        return max(ux * ux + uy * uy, vx * vx + vy * vy)

    def subdivide(p0, p1, p2, p3, depth=0):
        if depth > 10 or flatness(p0, p1, p2, p3) < tolerance * tolerance:
            points.append(p3)
            return

        m01 = midpoint(p0, p1)
        m12 = midpoint(p1, p2)
        m23 = midpoint(p2, p3)
        m012 = midpoint(m01, m12)
        m123 = midpoint(m12, m23)
        m0123 = midpoint(m012, m123)

        subdivide(p0, m01, m012, m0123, depth + 1)
        subdivide(m0123, m123, m23, p3, depth + 1)

    subdivide(p0, p1, p2, p3)
    return points


def subdivide_quadratic_bezier(p0: Point, p1: Point, p2: Point,
                               tolerance: float = 0.25) -> List[Point]:
    # elevate to cubic so there is a single flattening routine
    c1 = (p0[0] + 2.0 / 3.0 * (p1[0] - p0[0]), p0[1] + 2.0 / 3.0 * (p1[1] - p0[1]))
    c2 = (p2[0] + 2.0 / 3.0 * (p1[0] - p2[0]), p2[1] + 2.0 / 3.0 * (p1[1] - p2[1]))
    return subdivide_cubic_bezier(p0, c1, c2, p2, tolerance)


def approximate_arc(x1: float, y1: float, rx: float, ry: float,
                    rotation: float, large_arc: bool, sweep: bool,
                    x2: float, y2: float) -> List[Point]:
    """Points along an endpoint-parameterized elliptical arc, start point excluded."""
    if (x1, y1) == (x2, y2):
        return []
    if rx == 0 or ry == 0:
        return [(x2, y2)]

    cos_phi = math.cos(math.radians(rotation))
    sin_phi = math.sin(math.radians(rotation))

    dx = (x1 - x2) / 2
    dy = (y1 - y2) / 2
    x1p = cos_phi * dx + sin_phi * dy
    y1p = -sin_phi * dx + cos_phi * dy

    rx = abs(rx)
    ry = abs(ry)

    lambda_val = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lambda_val > 1:
        rx *= math.sqrt(lambda_val)
        ry *= math.sqrt(lambda_val)

    numerator = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    denominator = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    factor = math.sqrt(max(0.0, numerator / denominator))
    if large_arc == sweep:
        factor = -factor

    cxp = factor * rx * y1p / ry
    cyp = -factor * ry * x1p / rx

    cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
    cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

    theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
    dtheta = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx) - theta1

    if sweep and dtheta < 0:
        dtheta += 2 * math.pi
    elif not sweep and dtheta > 0:
        dtheta -= 2 * math.pi

    num_segments = max(4, int(abs(dtheta) / (math.pi / 16)) + 1)
    points = []
    for i in range(1, num_segments):
        theta = theta1 + dtheta * i / num_segments
        x = cx + rx * math.cos(theta) * cos_phi - ry * math.sin(theta) * sin_phi
        y = cy + rx * math.cos(theta) * sin_phi + ry * math.sin(theta) * cos_phi
        points.append((x, y))
    points.append((x2, y2))
    return points


def parse_path_data(path_str: str) -> list[Subpath]:
    subpaths: list[Subpath] = []
    current: list[Point] = []
    current_x, current_y = 0.0, 0.0
    start_x, start_y = 0.0, 0.0
    prev_cp = None
    prev_qcp = None

    def finish(closed: bool):
        nonlocal current
        if len(current) > 1 or closed and current:
            subpaths.append(Subpath(current, closed))
        current = []

    for cmd, numbers in tokenize_path_data(path_str):
        is_relative = cmd.islower()
        cmd_upper = cmd.upper()
        count = ARGUMENT_COUNTS[cmd_upper]

        if cmd_upper == 'Z':
            finish(True)
            current_x, current_y = start_x, start_y
            prev_cp = prev_qcp = None
            continue

        # a command with too few numbers is ignored as a whole
        for i in range(0, len(numbers) - count + 1, count):
            args = numbers[i:i + count]
            base_x, base_y = (current_x, current_y) if is_relative else (0.0, 0.0)
            cp = None
            qcp = None

            if cmd_upper == 'M' and i == 0:
                finish(False)
                current_x, current_y = base_x + args[0], base_y + args[1]
                start_x, start_y = current_x, current_y
                current.append((current_x, current_y))
                prev_cp = prev_qcp = None
                continue

            if not current:
                current.append((current_x, current_y))

            if cmd_upper in ('M', 'L'):
                end = (base_x + args[0], base_y + args[1])
                current.append(end)

            elif cmd_upper == 'H':
                end = ((current_x if is_relative else 0.0) + args[0], current_y)
                current.append(end)

            elif cmd_upper == 'V':
                end = (current_x, (current_y if is_relative else 0.0) + args[0])
                current.append(end)

            elif cmd_upper in ('C', 'S'):
                if cmd_upper == 'C':
                    cp1 = (base_x + args[0], base_y + args[1])
                    rest = args[2:]
                elif prev_cp is not None:
                    cp1 = (2 * current_x - prev_cp[0], 2 * current_y - prev_cp[1])
                    rest = args
                else:
                    cp1 = (current_x, current_y)
                    rest = args
                cp = (base_x + rest[0], base_y + rest[1])
                end = (base_x + rest[2], base_y + rest[3])
                current.extend(subdivide_cubic_bezier((current_x, current_y), cp1, cp, end))

            elif cmd_upper in ('Q', 'T'):
                if cmd_upper == 'Q':
                    qcp = (base_x + args[0], base_y + args[1])
                    end = (base_x + args[2], base_y + args[3])
                else:
                    if prev_qcp is not None:
                        qcp = (2 * current_x - prev_qcp[0], 2 * current_y - prev_qcp[1])
                    else:
                        qcp = (current_x, current_y)
                    end = (base_x + args[0], base_y + args[1])
                current.extend(subdivide_quadratic_bezier((current_x, current_y), qcp, end))

            else:
                end = (base_x + args[5], base_y + args[6])
                current.extend(approximate_arc(current_x, current_y, args[0], args[1], args[2],
                                               bool(args[3]), bool(args[4]), end[0], end[1]))

            current_x, current_y = end
            prev_cp = cp
            prev_qcp = qcp

    finish(False)
    return subpaths

from __future__ import annotations
import logging
import re
from errors import MalformedTransform, UnknownTransformFunction
from transform import Transform, TransformOp, TRANSFORM_FUNCTIONS

logger = logging.getLogger(__name__)

separator_pattern = re.compile(r'[\s,]*')
junk_pattern = re.compile(r'[^\s,]+')
function_pattern = re.compile(r'([A-Za-z_][\w-]*)\s*\(([^()]*)\)')
number_pattern = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')


def _parse_arguments(name: str, arg_string: str) -> tuple[float, ...]:
    # unreadable arguments count as 0, like omitted ones
    args = []
    pos = separator_pattern.match(arg_string).end()
    while pos < len(arg_string):
        match = number_pattern.match(arg_string, pos)
        if match is None:
            match = junk_pattern.match(arg_string, pos)
            logger.debug("Non-numeric argument %r in %s(), using 0", match.group(0), name)
            args.append(0.0)
        else:
            args.append(float(match.group(0)))
        pos = separator_pattern.match(arg_string, match.end()).end()
    return tuple(args)


def parse_transform_ops(transform_str: str) -> list[TransformOp]:
    if not transform_str:
        return []

    ops = []
    pos = separator_pattern.match(transform_str).end()
    while pos < len(transform_str):
        match = function_pattern.match(transform_str, pos)
        if match is None:
            rest = transform_str[pos:]
            if '(' in rest or ')' in rest:
                raise MalformedTransform(f"Unbalanced parentheses in transform: {rest.strip()!r}")
            raise MalformedTransform(f"Expected name(arguments) in transform: {rest.strip()!r}")

        name = match.group(1)
        if name not in TRANSFORM_FUNCTIONS:
            raise UnknownTransformFunction(name)

        ops.append(TransformOp(name, _parse_arguments(name, match.group(2))))
        pos = separator_pattern.match(transform_str, match.end()).end()

    return ops


def parse_transform_string(transform_str: str, base: Transform = None) -> Transform:
    result = base if base is not None else Transform.identity()
    for op in parse_transform_ops(transform_str):
        result = op.apply(result)
    return result

"""Human readable rendering of decoded message objects."""
from __future__ import annotations

import math
from collections.abc import Mapping, Set
from typing import Any

from .utils import map_to_obj

__all__ = [
    "indent",
    "stringify_number",
    "stringify_obj",
    "stringify_arr",
    "stringify_value",
    "bytes_to_human_str",
]

_HEX_LINE_WIDTH = 16


def indent(depth: int) -> str:
    return " " * (depth * 4)


def stringify_obj(obj: Mapping[Any, Any], depth: int) -> str:
    lines = ["{\n"]
    depth += 1
    for key, value in obj.items():
        lines.append(f"{indent(depth)}{key}: {stringify_value(value, depth)},\n")
    depth -= 1
    lines.append(indent(depth) + "}")
    return "".join(lines)


def stringify_arr(arr: Any, depth: int) -> str:
    lines = ["[\n"]
    depth += 1
    for item in arr:
        lines.append(f"{indent(depth)}{stringify_value(item, depth)},\n")
    depth -= 1
    lines.append(indent(depth) + "]")
    return "".join(lines)


def stringify_number(value: float) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def stringify_value(value: Any, depth: int) -> str:
    """Render a single value found at nesting level ``depth``."""

    if value is None:
        return "null"
    if isinstance(value, str):
        return '"' + value.replace("\n", "\n" + indent(depth + 1)) + '"'
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return stringify_number(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes_to_human_str(value, depth + 1)
    if isinstance(value, (list, tuple)):
        return stringify_arr(value, depth)
    if isinstance(value, Set):
        return stringify_arr(sorted(value, key=str), depth)
    if isinstance(value, Mapping):
        return stringify_obj(map_to_obj(value), depth)
    raise TypeError(f"unknown type in stringifyType: {type(value).__name__}")


def bytes_to_human_str(buf: Any, depth: int) -> str:
    """Render ``buf`` as a header line followed by a 16 bytes per line hex dump."""

    data = bytes(buf)
    ret = f"[ArrayBuffer] ({len(data)} bytes)\n"
    for offset in range(0, len(data), _HEX_LINE_WIDTH):
        chunk = data[offset : offset + _HEX_LINE_WIDTH]
        ret += indent(depth) + " ".join(f"{byte:02X}" for byte in chunk) + "\n"

    return ret[:-1]

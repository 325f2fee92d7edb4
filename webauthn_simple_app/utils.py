"""Conversions between the wire (base64url text) and in-memory (bytes) forms."""
from __future__ import annotations

import binascii
from collections.abc import Mapping
from typing import Any, Dict, Optional

from fido2.utils import websafe_decode, websafe_encode

from .errors import CoercionError

__all__ = [
    "coerce_to_base64url",
    "coerce_to_bytes",
    "ab2str",
    "str2ab",
    "map_to_obj",
]

_BYTES_LIKE = (bytes, bytearray, memoryview)
_BASE64_TO_WEBSAFE = str.maketrans("+/", "-_")


def _copy_bytes(value: Any) -> Optional[bytes]:
    """Return a fresh ``bytes`` copy of a byte sequence, or ``None``."""

    if isinstance(value, _BYTES_LIKE) or isinstance(value, (list, tuple)):
        try:
            return bytes(bytearray(value))
        except (TypeError, ValueError):
            return None
    return None


def coerce_to_base64url(thing: Any, name: Optional[str] = None) -> str:
    """Encode ``thing`` as unpadded base64url.

    ``thing`` may be a list of byte values, any bytes-like object, or a
    base64/base64url string (which is normalised to unpadded base64url).
    """

    name = name or "''"

    if not isinstance(thing, str):
        data = _copy_bytes(thing)
        if data is None:
            raise CoercionError(f"could not coerce '{name}' to string")
        thing = websafe_encode(data)

    return thing.translate(_BASE64_TO_WEBSAFE).rstrip("=")


def coerce_to_bytes(buf: Any, name: Optional[str] = None) -> bytes:
    """Decode ``buf`` into a new ``bytes`` object.

    Strings are accepted in either the base64 or the base64url alphabet, with
    or without padding; trailing bits that do not fill a byte are dropped.
    Byte sequences are copied.
    """

    name = name or "''"

    if isinstance(buf, str):
        text = buf.translate(_BASE64_TO_WEBSAFE).rstrip("=")
        # A lone trailing character carries no whole byte.
        if len(text) % 4 == 1:
            text = text[:-1]
        try:
            return websafe_decode(text)
        except (binascii.Error, ValueError) as exc:
            raise CoercionError(f"could not coerce '{name}' to ArrayBuffer") from exc

    data = _copy_bytes(buf)
    if data is None:
        raise CoercionError(f"could not coerce '{name}' to ArrayBuffer")
    return data


def ab2str(data: Any, name: Optional[str] = None) -> str:
    """Decode raw bytes holding UTF-8 text (e.g. client data JSON)."""

    name = name or "''"
    raw = _copy_bytes(data)
    if raw is None:
        raise CoercionError(f"could not coerce '{name}' to string")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CoercionError(f"could not coerce '{name}' to string") from exc


def str2ab(text: Any, name: Optional[str] = None) -> bytes:
    name = name or "''"
    if not isinstance(text, str):
        raise CoercionError(f"could not coerce '{name}' to ArrayBuffer")
    return text.encode("utf-8")


def map_to_obj(mapping: Mapping[Any, Any]) -> Dict[Any, Any]:
    return {key: value for key, value in mapping.items()}

"""Assertion helpers used to validate WebAuthn message properties.

Every check either returns ``None`` or raises :class:`ValidationError` with a
message naming the offending property. The wording of those messages is
shared with the browser half of the application, so it is kept stable and uses
JavaScript spellings for missing values (``undefined``) and ``None``
(``null``).

Containers are any :class:`~collections.abc.Mapping` (a message, or a plain
``dict`` nested inside one). A key that is not present is "absent"; a key that
maps to ``None`` is present with a ``null`` value.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum, unique
from typing import Any, Iterable, Optional, Union

from fido2.webauthn import (
    AttestationConveyancePreference,
    AuthenticatorAttachment,
    AuthenticatorTransport,
    PublicKeyCredentialType,
    UserVerificationRequirement,
)

from .errors import ValidationError
from .render import stringify_number

__all__ = [
    "MISSING",
    "Shape",
    "check_type",
    "check_optional_type",
    "check_format",
    "check_optional_format",
    "check_true",
    "check_user_verification",
    "check_authenticator_selection",
    "check_credential_descriptor_list",
    "check_attestation",
    "is_base64url",
    "js_typeof",
    "describe_value",
]


class _Missing:
    """Marker for a property that is not present on its container."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@unique
class Shape(str, Enum):
    """Expected shape of a property value.

    The lower case members are compared against :func:`js_typeof`; ``ARRAY``
    and ``RECORD`` are structural checks for sequences and mappings.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "Array"
    RECORD = "Object"

    @property
    def is_primitive(self) -> bool:
        return self not in (Shape.ARRAY, Shape.RECORD)


FORMATS = ("non-empty-string", "base64url", "positive-integer", "nullable-base64")

USER_VERIFICATION_VALUES = tuple(e.value for e in UserVerificationRequirement)
AUTHENTICATOR_ATTACHMENT_VALUES = tuple(e.value for e in AuthenticatorAttachment)
ATTESTATION_VALUES = (
    AttestationConveyancePreference.DIRECT.value,
    AttestationConveyancePreference.NONE.value,
    AttestationConveyancePreference.INDIRECT.value,
)
TRANSPORT_VALUES = (
    AuthenticatorTransport.USB.value,
    AuthenticatorTransport.NFC.value,
    AuthenticatorTransport.BLE.value,
)
PUBLIC_KEY = PublicKeyCredentialType.PUBLIC_KEY.value

_BASE64URL_PATTERN = re.compile(r"[A-Za-z0-9\-_]+={0,2}")
_UINT32_MAX = 0xFFFFFFFF


def _lookup(container: Any, prop: str) -> Any:
    if not isinstance(container, Mapping):
        return MISSING
    return container.get(prop, MISSING)


def js_typeof(value: Any) -> str:
    """Return the JavaScript ``typeof`` spelling for ``value``."""

    if value is MISSING:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def describe_value(value: Any) -> str:
    """Render ``value`` the way it appears inside validation messages."""

    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return stringify_number(value)
    return str(value)


def _matches_shape(value: Any, shape: Shape) -> bool:
    if shape.is_primitive:
        return js_typeof(value) == shape.value
    if shape is Shape.ARRAY:
        return isinstance(value, (list, tuple))
    return isinstance(value, Mapping)


def check_true(truthy: Any, msg: str) -> None:
    if not truthy:
        raise ValidationError(msg)


def check_type(container: Any, prop: str, expected: Union[Shape, str]) -> None:
    """Require ``container[prop]`` to have the ``expected`` shape."""

    try:
        shape = Shape(expected)
    except ValueError:
        raise ValidationError("internal error: checkType received invalid type") from None

    value = _lookup(container, prop)
    if _matches_shape(value, shape):
        return

    got = js_typeof(value) if shape.is_primitive else describe_value(value)
    raise ValidationError(f"expected '{prop}' to be '{shape.value}', got: {got}")


def check_optional_type(container: Any, prop: str, expected: Union[Shape, str]) -> None:
    if _lookup(container, prop) is MISSING:
        return
    check_type(container, prop, expected)


def is_base64url(value: str) -> bool:
    return _BASE64URL_PATTERN.fullmatch(value) is not None


def _is_uint32(value: Any) -> bool:
    if isinstance(value, float) and not value.is_integer():
        return False
    return 0 <= value <= _UINT32_MAX


def check_format(container: Any, prop: str, fmt: str) -> None:
    """Require ``container[prop]`` to satisfy the named string format."""

    value = _lookup(container, prop)
    if fmt == "non-empty-string":
        check_type(container, prop, Shape.STRING)
        check_true(len(value) > 0, f"expected '{prop}' to be non-empty string")
    elif fmt == "base64url":
        check_type(container, prop, Shape.STRING)
        check_true(
            is_base64url(value),
            f"expected '{prop}' to be base64url format, got: {value}",
        )
    elif fmt == "positive-integer":
        check_type(container, prop, Shape.NUMBER)
        check_true(_is_uint32(value), f"expected '{prop}' to be positive integer")
    elif fmt == "nullable-base64":
        check_true(
            value is MISSING or value is None or isinstance(value, str),
            f"expected '{prop}' to be null or string",
        )
        if not value:
            return
        check_true(
            is_base64url(value),
            f"expected '{prop}' to be base64url format, got: {value}",
        )
    else:
        raise ValidationError("internal error: unknown format")


def check_optional_format(container: Any, prop: str, fmt: str) -> None:
    if _lookup(container, prop) is MISSING:
        return
    check_format(container, prop, fmt)


def check_user_verification(value: Any) -> None:
    check_true(
        value in USER_VERIFICATION_VALUES,
        "userVerification must be 'required', 'preferred' or 'discouraged'",
    )


def check_authenticator_selection(container: Mapping[str, Any]) -> None:
    check_optional_type(container, "authenticatorSelection", Shape.RECORD)
    selection = _lookup(container, "authenticatorSelection")
    if not selection:
        return

    attachment = selection.get("authenticatorAttachment")
    if attachment:
        check_true(
            attachment in AUTHENTICATOR_ATTACHMENT_VALUES,
            "authenticatorAttachment must be either 'platform' or 'cross-platform'",
        )

    user_verification = selection.get("userVerification")
    if user_verification:
        check_user_verification(user_verification)

    check_optional_type(selection, "requireResidentKey", Shape.BOOLEAN)


def check_credential_descriptor_list(descriptors: Iterable[Any]) -> None:
    for cred in descriptors:
        check_format(cred, "id", "base64url")
        check_true(
            _lookup(cred, "type") == PUBLIC_KEY,
            "credential type must be 'public-key'",
        )
        check_optional_type(cred, "transports", Shape.ARRAY)
        for transport in _lookup(cred, "transports") or ():
            check_true(
                transport in TRANSPORT_VALUES,
                "expected transport to be 'usb', 'nfc', or 'ble', got: "
                + describe_value(transport),
            )


def check_attestation(container: Mapping[str, Any]) -> None:
    attestation = _lookup(container, "attestation")
    if attestation:
        check_true(
            attestation in ATTESTATION_VALUES,
            "expected attestation to be 'direct', 'none', or 'indirect'",
        )

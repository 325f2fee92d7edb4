"""Ceremony parameters returned by the server for ``create()`` and ``get()``."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Tuple

from ..validation import (
    PUBLIC_KEY,
    Shape,
    check_attestation,
    check_authenticator_selection,
    check_credential_descriptor_list,
    check_format,
    check_optional_format,
    check_true,
    check_type,
    check_user_verification,
)
from .base import Field, decode_member, encode_member
from .server_response import ENVELOPE_FIELDS, ServerResponse

__all__ = ["CreateOptions", "GetOptions"]


def _check_rp(msg: Mapping[str, Any]) -> None:
    rp = msg["rp"]
    check_format(rp, "name", "non-empty-string")
    check_optional_format(rp, "id", "non-empty-string")
    check_optional_format(rp, "icon", "non-empty-string")


def _check_user(msg: Mapping[str, Any]) -> None:
    user = msg["user"]
    check_format(user, "name", "non-empty-string")
    check_format(user, "id", "base64url")
    check_format(user, "displayName", "non-empty-string")
    check_optional_format(user, "icon", "non-empty-string")


def _check_pub_key_cred_params(msg: Mapping[str, Any]) -> None:
    for param in msg["pubKeyCredParams"]:
        check_type(param, "alg", Shape.NUMBER)
        check_true(param.get("type") == PUBLIC_KEY, "credential type must be 'public-key'")


def _descriptor_list_check(name: str):
    def check(msg: Mapping[str, Any]) -> None:
        if msg.get(name):
            check_credential_descriptor_list(msg[name])

    return check


def _check_user_verification(msg: Mapping[str, Any]) -> None:
    if msg.get("userVerification"):
        check_user_verification(msg["userVerification"])


_CREATE_OPTIONS_FIELDS: Tuple[Field, ...] = (
    Field("rp", Shape.RECORD, required=True, check=_check_rp),
    Field("user", Shape.RECORD, required=True, check=_check_user),
    Field("challenge", required=True, fmt="base64url", binary=True),
    Field(
        "pubKeyCredParams",
        Shape.ARRAY,
        required=True,
        check=_check_pub_key_cred_params,
    ),
    Field("timeout", fmt="positive-integer"),
    Field(
        "excludeCredentials",
        Shape.ARRAY,
        check=_descriptor_list_check("excludeCredentials"),
    ),
    Field("authenticatorSelection", check=check_authenticator_selection),
    Field("attestation", check=check_attestation),
    Field("extensions", Shape.RECORD),
    Field("rawChallenge", fmt="base64url", binary=True),
)

_GET_OPTIONS_FIELDS: Tuple[Field, ...] = (
    Field("challenge", required=True, fmt="base64url", binary=True),
    Field("timeout", fmt="positive-integer"),
    Field("rpId", fmt="non-empty-string"),
    Field(
        "allowCredentials",
        Shape.ARRAY,
        check=_descriptor_list_check("allowCredentials"),
    ),
    Field("userVerification", check=_check_user_verification),
    Field("extensions", Shape.RECORD),
    Field("rawChallenge", fmt="base64url", binary=True),
)


class CreateOptions(ServerResponse):
    """The options to be used for WebAuthn ``create()``."""

    FIELDS = ENVELOPE_FIELDS + _CREATE_OPTIONS_FIELDS

    def validate(self) -> None:
        self.validate_envelope()
        self.validate_fields(_CREATE_OPTIONS_FIELDS)

    def decode_binary_properties(self) -> None:
        super().decode_binary_properties()

        user = self.get("user")
        if isinstance(user, Mapping) and user.get("id"):
            decode_member(user, "id", "user.id")

        for idx, cred in enumerate(self.get("excludeCredentials") or ()):
            decode_member(cred, "id", f"excludeCredentials[{idx}].id")

    def encode_binary_properties(self) -> None:
        super().encode_binary_properties()

        user = self.get("user")
        if isinstance(user, Mapping) and user.get("id"):
            encode_member(user, "id", "user.id")

        for idx, cred in enumerate(self.get("excludeCredentials") or ()):
            encode_member(cred, "id", f"excludeCredentials[{idx}].id")


class GetOptions(ServerResponse):
    """The options to be used for WebAuthn ``get()``."""

    FIELDS = ENVELOPE_FIELDS + _GET_OPTIONS_FIELDS

    def validate(self) -> None:
        self.validate_envelope()
        self.validate_fields(_GET_OPTIONS_FIELDS)

    def decode_binary_properties(self) -> None:
        super().decode_binary_properties()

        for idx, cred in enumerate(self.get("allowCredentials") or ()):
            decode_member(cred, "id", f"allowCredentials[{idx}].id")

    def encode_binary_properties(self) -> None:
        super().encode_binary_properties()

        for idx, cred in enumerate(self.get("allowCredentials") or ()):
            encode_member(cred, "id", f"allowCredentials[{idx}].id")

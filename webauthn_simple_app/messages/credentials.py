"""``PublicKeyCredential`` results returned by ``create()`` and ``get()``."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Tuple, Type, TypeVar

from ..validation import MISSING, Shape, check_format, check_optional_format
from .base import Field, Message, decode_member, encode_member

__all__ = ["CredentialAttestation", "CredentialAssertion"]

_C = TypeVar("_C", bound="_Credential")


class _Credential(Message):
    # Sub-fields of ``response`` kept by from_json, in wire order.
    RESPONSE_KEYS: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def from_json(cls: Type[_C], json_value: Any = MISSING) -> _C:
        msg = super().from_json(json_value)

        # The platform's response object may be read-only or carry extra members.
        response = msg.get("response")
        if isinstance(response, Mapping):
            msg["response"] = {
                key: response[key] for key in cls.RESPONSE_KEYS if key in response
            }

        return msg


def _check_attestation_response(msg: Mapping[str, Any]) -> None:
    response = msg["response"]
    check_format(response, "attestationObject", "base64url")
    check_format(response, "clientDataJSON", "base64url")


def _check_assertion_response(msg: Mapping[str, Any]) -> None:
    response = msg["response"]
    check_format(response, "authenticatorData", "base64url")
    check_format(response, "clientDataJSON", "base64url")
    check_format(response, "signature", "base64url")
    check_optional_format(response, "userHandle", "nullable-base64")


class CredentialAttestation(_Credential):
    """The ``PublicKeyCredential`` produced by a ``create()`` call."""

    FIELDS = (
        Field("rawId", required=True, fmt="base64url", binary=True),
        Field("id", fmt="base64url", binary=True),
        Field("response", Shape.RECORD, required=True, check=_check_attestation_response),
        Field("getClientExtensionResults", Shape.RECORD),
    )
    RESPONSE_KEYS = ("clientDataJSON", "attestationObject")

    def validate(self) -> None:
        self.validate_fields()

    def decode_binary_properties(self) -> None:
        super().decode_binary_properties()

        response = self.get("response")
        decode_member(response, "attestationObject", "response.attestationObject")
        decode_member(response, "clientDataJSON", "response.clientDataJSON")

    def encode_binary_properties(self) -> None:
        super().encode_binary_properties()

        response = self.get("response")
        encode_member(response, "attestationObject", "response.attestationObject")
        encode_member(response, "clientDataJSON", "response.clientDataJSON")


class CredentialAssertion(_Credential):
    """The ``PublicKeyCredential`` produced by a ``get()`` call."""

    FIELDS = (
        Field("rawId", required=True, fmt="base64url", binary=True),
        Field("id", fmt="base64url", binary=True),
        Field("response", Shape.RECORD, required=True, check=_check_assertion_response),
        Field("getClientExtensionResults", Shape.RECORD),
    )
    RESPONSE_KEYS = ("clientDataJSON", "authenticatorData", "signature", "userHandle")

    def validate(self) -> None:
        self.validate_fields()

    def decode_binary_properties(self) -> None:
        super().decode_binary_properties()

        response = self.get("response")
        decode_member(response, "clientDataJSON", "response.clientDataJSON")
        decode_member(response, "signature", "response.signature")
        decode_member(response, "authenticatorData", "response.authenticatorData")

        # A missing user handle travels as null or "" and is held as empty bytes.
        if "userHandle" in response:
            if response["userHandle"] in (None, ""):
                response["userHandle"] = b""
            else:
                decode_member(response, "userHandle", "response.userHandle")

    def encode_binary_properties(self) -> None:
        super().encode_binary_properties()

        response = self.get("response")
        encode_member(response, "clientDataJSON", "response.clientDataJSON")
        encode_member(response, "signature", "response.signature")
        encode_member(response, "authenticatorData", "response.authenticatorData")

        user_handle = response.get("userHandle")
        if isinstance(user_handle, (bytes, bytearray, memoryview)) and len(user_handle) == 0:
            response["userHandle"] = None
        elif user_handle:
            encode_member(response, "userHandle", "response.userHandle")

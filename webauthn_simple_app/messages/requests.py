"""Messages the browser sends to ask the server for ceremony options."""
from __future__ import annotations

from ..validation import check_attestation, check_authenticator_selection
from .base import Field, Message

__all__ = ["CreateOptionsRequest", "GetOptionsRequest"]


class CreateOptionsRequest(Message):
    """Requests the options for a WebAuthn ``create()`` call."""

    FIELDS = (
        Field("username", required=True, fmt="non-empty-string"),
        Field("displayName", required=True, fmt="non-empty-string"),
        Field("authenticatorSelection", check=check_authenticator_selection),
        Field("attestation", check=check_attestation),
        Field("extraData", fmt="base64url"),
    )

    def validate(self) -> None:
        self.validate_fields()


class GetOptionsRequest(Message):
    """Requests the options for a WebAuthn ``get()`` call."""

    FIELDS = (
        Field("username", required=True, fmt="non-empty-string"),
        Field("displayName", required=True, fmt="non-empty-string"),
        Field("extraData", fmt="base64url"),
    )

    def validate(self) -> None:
        self.validate_fields()

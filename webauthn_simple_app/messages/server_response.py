"""Generic success / failure envelope sent by the server."""
from __future__ import annotations

from collections.abc import Mapping, Set
from typing import Tuple

from ..errors import ValidationError
from ..utils import ab2str, map_to_obj, str2ab
from ..validation import (
    MISSING,
    Shape,
    check_optional_type,
    check_true,
    check_type,
    describe_value,
)
from .base import Field, Message, decode_member, encode_member

__all__ = ["ServerResponse", "ENVELOPE_FIELDS"]

ENVELOPE_FIELDS: Tuple[Field, ...] = (
    Field("status", Shape.STRING, required=True),
    Field("errorMessage", Shape.STRING),
    Field("debugInfo", Shape.OBJECT),
)

# (key, optional) pairs of binary values inside debugInfo.authnrData
_AUTHNR_DATA_BINARY = (
    ("rawAuthnrData", False),
    ("rpIdHash", False),
    ("aaguid", True),
    ("credId", True),
    ("credentialPublicKeyCose", True),
    ("sig", True),
    ("attCert", True),
)


class ServerResponse(Message):
    """Indicates success or failure of a request.

    Used on its own for simple replies and embedded in the options messages,
    which validate this envelope before their own properties.
    """

    FIELDS = ENVELOPE_FIELDS

    def validate(self) -> None:
        self.validate_envelope()

    def validate_envelope(self) -> None:
        status = self.get("status")
        if status == "ok":
            if "errorMessage" not in self:
                self["errorMessage"] = ""
            check_true(
                self["errorMessage"] == "",
                "errorMessage must be empty string when status is 'ok'",
            )
            check_optional_type(self, "debugInfo", Shape.OBJECT)
        elif status == "failed":
            check_type(self, "errorMessage", Shape.STRING)
            check_true(
                len(self["errorMessage"]) > 0,
                "errorMessage must be non-zero length when status is 'failed'",
            )
            check_optional_type(self, "debugInfo", Shape.OBJECT)
        else:
            raise ValidationError(
                "'expected 'status' to be 'string', got: "
                + describe_value(self.get("status", MISSING))
            )

    def decode_binary_properties(self) -> None:
        super().decode_binary_properties()

        debug_info = self.get("debugInfo")
        if not isinstance(debug_info, Mapping):
            return

        client_data = debug_info.get("clientData")
        if isinstance(client_data, Mapping):
            decode_member(client_data, "rawId", "rawId")
            if "rawClientDataJson" in client_data:
                client_data["rawClientDataJson"] = str2ab(
                    client_data["rawClientDataJson"], "clientData.rawClientDataJson"
                )

        authnr_data = debug_info.get("authnrData")
        if isinstance(authnr_data, Mapping):
            for key, optional in _AUTHNR_DATA_BINARY:
                decode_member(authnr_data, key, key, optional=optional)
            if "flags" in authnr_data:
                # Set view that keeps wire order.
                authnr_data["flags"] = dict.fromkeys(authnr_data["flags"]).keys()

        audit = debug_info.get("audit")
        if isinstance(audit, Mapping):
            for key in ("warning", "info"):
                if isinstance(audit.get(key), Mapping):
                    audit[key] = map_to_obj(audit[key])

    def encode_binary_properties(self) -> None:
        super().encode_binary_properties()

        debug_info = self.get("debugInfo")
        if not isinstance(debug_info, Mapping):
            return

        client_data = debug_info.get("clientData")
        if isinstance(client_data, Mapping):
            encode_member(client_data, "rawId", "rawId")
            if "rawClientDataJson" in client_data:
                client_data["rawClientDataJson"] = ab2str(
                    client_data["rawClientDataJson"], "clientData.rawClientDataJson"
                )

        authnr_data = debug_info.get("authnrData")
        if isinstance(authnr_data, Mapping):
            for key, optional in _AUTHNR_DATA_BINARY:
                encode_member(authnr_data, key, key, optional=optional)
            if isinstance(authnr_data.get("flags"), Set):
                authnr_data["flags"] = list(authnr_data["flags"])

        audit = debug_info.get("audit")
        if isinstance(audit, Mapping):
            for key in ("warning", "info"):
                if isinstance(audit.get(key), Mapping):
                    audit[key] = map_to_obj(audit[key])
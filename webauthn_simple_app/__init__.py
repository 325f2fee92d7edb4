"""Validated, serializable messages for the WebAuthn create and get ceremonies."""
from .config import DEFAULT_ROUTES
from .errors import CoercionError, MessageError, MessageParseError, ValidationError
from .messages import (
    CreateOptions,
    CreateOptionsRequest,
    CredentialAssertion,
    CredentialAttestation,
    GetOptions,
    GetOptionsRequest,
    Message,
    ServerResponse,
)
from .utils import coerce_to_base64url, coerce_to_bytes

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_ROUTES",
    "CoercionError",
    "MessageError",
    "MessageParseError",
    "ValidationError",
    "Message",
    "ServerResponse",
    "CreateOptionsRequest",
    "CreateOptions",
    "CredentialAttestation",
    "GetOptionsRequest",
    "GetOptions",
    "CredentialAssertion",
    "coerce_to_base64url",
    "coerce_to_bytes",
]

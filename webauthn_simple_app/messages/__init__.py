"""Message classes exchanged between the browser and the server."""
from .base import Field, Message
from .credentials import CredentialAssertion, CredentialAttestation
from .options import CreateOptions, GetOptions
from .requests import CreateOptionsRequest, GetOptionsRequest
from .server_response import ServerResponse

__all__ = [
    "Field",
    "Message",
    "ServerResponse",
    "CreateOptionsRequest",
    "CreateOptions",
    "CredentialAttestation",
    "GetOptionsRequest",
    "GetOptions",
    "CredentialAssertion",
]

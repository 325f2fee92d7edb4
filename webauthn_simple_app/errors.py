"""Exceptions raised while validating and converting WebAuthn messages."""
from __future__ import annotations


class MessageError(Exception):
    """Base exception for message related errors."""


class ValidationError(MessageError, ValueError):
    """A message or one of its properties has the wrong type or format."""


class CoercionError(MessageError, TypeError):
    """A value could not be converted between base64url and raw bytes."""


class MessageParseError(MessageError, TypeError):
    """The input could not be interpreted as a message object."""


__all__ = ["MessageError", "ValidationError", "CoercionError", "MessageParseError"]

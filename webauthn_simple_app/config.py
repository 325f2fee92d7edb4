"""Route and logging configuration for the WebAuthn message endpoints."""
from __future__ import annotations

import os
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from flask import Flask

__all__ = [
    "DEFAULT_ROUTES",
    "ROUTE_CONFIG_KEYS",
    "LOG_MESSAGES_KEY",
    "configure_app",
    "load_routes",
]

DEFAULT_ROUTES: Mapping[str, str] = MappingProxyType(
    {
        "attestationOptions": "/attestation/options",
        "attestationResult": "/attestation/result",
        "assertionOptions": "/assertion/options",
        "assertionResult": "/assertion/result",
    }
)

ROUTE_CONFIG_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "attestationOptions": "WEBAUTHN_ATTESTATION_OPTIONS_ROUTE",
        "attestationResult": "WEBAUTHN_ATTESTATION_RESULT_ROUTE",
        "assertionOptions": "WEBAUTHN_ASSERTION_OPTIONS_ROUTE",
        "assertionResult": "WEBAUTHN_ASSERTION_RESULT_ROUTE",
    }
)

LOG_MESSAGES_KEY = "WEBAUTHN_LOG_MESSAGES"


def _env_flag(name: str, environ: Optional[Mapping[str, str]] = None) -> Optional[bool]:
    """Return ``True`` or ``False`` when the named env var is explicitly set."""

    raw_value = (os.environ if environ is None else environ).get(name)
    if raw_value is None:
        return None

    normalised = raw_value.strip().lower()
    if normalised in {"", "0", "false", "off", "no"}:
        return False
    return True


def _check_route(key: str, value: object) -> str:
    if not isinstance(value, str) or not value.startswith("/"):
        raise ValueError(f"{key} must be a path starting with '/', got: {value!r}")
    return value


def load_routes(
    config: Optional[Mapping[str, object]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Resolve the endpoint paths.

    Each path is taken from ``config`` when present there, then from the
    environment, then from :data:`DEFAULT_ROUTES`.
    """

    config = config or {}
    environ = os.environ if environ is None else environ

    routes = {}
    for name, key in ROUTE_CONFIG_KEYS.items():
        if key in config:
            value = config[key]
        else:
            value = environ.get(key, DEFAULT_ROUTES[name])
        routes[name] = _check_route(key, value)
    return routes


def configure_app(app: Flask, environ: Optional[Mapping[str, str]] = None) -> None:
    """Populate ``app.config`` with the settings not already present."""

    for name, path in load_routes(app.config, environ).items():
        app.config.setdefault(ROUTE_CONFIG_KEYS[name], path)

    app.config.setdefault(LOG_MESSAGES_KEY, bool(_env_flag(LOG_MESSAGES_KEY, environ)))

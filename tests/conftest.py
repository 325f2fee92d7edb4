import json

import pytest
from fido2.utils import websafe_encode

CHALLENGE = bytes(range(64))
RAW_CHALLENGE = bytes(range(100, 132))
USER_ID = b"\x25\x91\x9e\x65\x71\x31\x4d\x93\x97\x7a\x51\xfb\x50\x59\x7c\x64"
CREDENTIAL_ID = bytes.fromhex("622518ecb4dd41109f3a62008c269c085f63a1b2c3d4e5f6")
OTHER_CREDENTIAL_ID = bytes.fromhex("00112233445566778899aabbccddeeff")
AUTH_DATA = bytes(37)
SIGNATURE = b"\x11" * 64
ATTESTATION_OBJECT = bytes.fromhex("a363666d74646e6f6e656761747453746d74a068617574684461746100")


def client_data(kind: str) -> bytes:
    return json.dumps(
        {
            "type": kind,
            "challenge": websafe_encode(CHALLENGE),
            "origin": "https://localhost:8443",
        },
        separators=(",", ":"),
    ).encode("utf-8")


@pytest.fixture
def create_options_request():
    return {
        "username": "bubba",
        "displayName": "Bubba Smith",
        "authenticatorSelection": {
            "authenticatorAttachment": "cross-platform",
            "requireResidentKey": False,
            "userVerification": "preferred",
        },
        "attestation": "none",
    }


@pytest.fixture
def get_options_request():
    return {
        "username": "bubba",
        "displayName": "Bubba Smith",
    }


@pytest.fixture
def create_options():
    return {
        "status": "ok",
        "errorMessage": "",
        "rp": {"name": "My RP", "id": "localhost", "icon": "https://example.com/rp.png"},
        "user": {
            "id": websafe_encode(USER_ID),
            "displayName": "Bubba Smith",
            "name": "bubba",
            "icon": "https://example.com/user.png",
        },
        "challenge": websafe_encode(CHALLENGE),
        "pubKeyCredParams": [
            {"type": "public-key", "alg": -7},
            {"type": "public-key", "alg": -257},
        ],
        "timeout": 30000,
        "excludeCredentials": [
            {"type": "public-key", "id": websafe_encode(CREDENTIAL_ID), "transports": ["usb", "nfc"]},
            {"type": "public-key", "id": websafe_encode(OTHER_CREDENTIAL_ID)},
        ],
        "authenticatorSelection": {
            "authenticatorAttachment": "platform",
            "requireResidentKey": True,
            "userVerification": "required",
        },
        "attestation": "direct",
        "extensions": {"credProps": True},
        "rawChallenge": websafe_encode(RAW_CHALLENGE),
    }


@pytest.fixture
def get_options():
    return {
        "status": "ok",
        "errorMessage": "",
        "challenge": websafe_encode(CHALLENGE),
        "timeout": 60000,
        "rpId": "localhost",
        "allowCredentials": [
            {"type": "public-key", "id": websafe_encode(CREDENTIAL_ID), "transports": ["usb", "nfc", "ble"]},
        ],
        "userVerification": "discouraged",
        "extensions": {"appid": "https://localhost:8443"},
        "rawChallenge": websafe_encode(RAW_CHALLENGE),
    }


@pytest.fixture
def credential_attestation():
    return {
        "rawId": websafe_encode(CREDENTIAL_ID),
        "id": websafe_encode(CREDENTIAL_ID),
        "response": {
            "clientDataJSON": websafe_encode(client_data("webauthn.create")),
            "attestationObject": websafe_encode(ATTESTATION_OBJECT),
        },
        "getClientExtensionResults": {},
    }


@pytest.fixture
def credential_assertion():
    return {
        "rawId": websafe_encode(CREDENTIAL_ID),
        "id": websafe_encode(CREDENTIAL_ID),
        "response": {
            "clientDataJSON": websafe_encode(client_data("webauthn.get")),
            "authenticatorData": websafe_encode(AUTH_DATA),
            "signature": websafe_encode(SIGNATURE),
            "userHandle": websafe_encode(USER_ID),
        },
        "getClientExtensionResults": {},
    }


@pytest.fixture
def attestation_debug_info():
    return {
        "clientData": {
            "challenge": websafe_encode(CHALLENGE),
            "origin": "https://localhost:8443",
            "type": "webauthn.create",
            "rawClientDataJson": client_data("webauthn.create").decode("utf-8"),
            "rawId": websafe_encode(CREDENTIAL_ID),
        },
        "authnrData": {
            "fmt": "none",
            "rawAuthnrData": websafe_encode(AUTH_DATA),
            "rpIdHash": websafe_encode(bytes(range(32))),
            "flags": ["AT", "UP"],
            "counter": 0,
            "aaguid": websafe_encode(bytes(16)),
            "credIdLen": len(CREDENTIAL_ID),
            "credId": websafe_encode(CREDENTIAL_ID),
            "credentialPublicKeyCose": websafe_encode(b"\xa5\x01\x02\x03\x26"),
        },
        "audit": {
            "validExpectations": True,
            "validRequest": True,
            "complete": True,
            "warning": {"attesation-not-validated": "could not validate attestation because the root attestation certification could not be found"},
            "info": {"yubico-device-id": "YubiKey 4/YubiKey 4 Nano"},
        },
    }

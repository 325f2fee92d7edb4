import copy
import re

import pytest

from conftest import CHALLENGE, CREDENTIAL_ID, OTHER_CREDENTIAL_ID, RAW_CHALLENGE, USER_ID
from webauthn_simple_app.errors import CoercionError, ValidationError
from webauthn_simple_app.messages import CreateOptions, GetOptions, ServerResponse


def _raises(message):
    return pytest.raises(ValidationError, match="^" + re.escape(message) + "$")


def test_options_are_server_responses():
    assert isinstance(CreateOptions(), ServerResponse)
    assert isinstance(GetOptions(), ServerResponse)
    assert CreateOptions.prop_list[:3] == ("status", "errorMessage", "debugInfo")
    assert GetOptions.prop_list == (
        "status",
        "errorMessage",
        "debugInfo",
        "challenge",
        "timeout",
        "rpId",
        "allowCredentials",
        "userVerification",
        "extensions",
        "rawChallenge",
    )


def test_create_options_round_trip(create_options):
    msg = CreateOptions.from_json(create_options)

    msg.validate()
    msg.validate()
    assert msg.to_object() == create_options


def test_create_options_minimal(create_options):
    minimal = {
        key: create_options[key] for key in ("status", "rp", "user", "challenge", "pubKeyCredParams")
    }
    msg = CreateOptions.from_json(minimal)

    msg.validate()
    assert msg.errorMessage == ""


def test_create_options_validates_envelope_first(create_options):
    create_options["status"] = "failed"
    del create_options["challenge"]

    with _raises("errorMessage must be non-zero length when status is 'failed'"):
        CreateOptions.from_json(create_options).validate()


@pytest.mark.parametrize(
    "path, value, message",
    [
        (("rp",), None, "expected 'rp' to be 'Object', got: null"),
        (("rp", "name"), "", "expected 'name' to be non-empty string"),
        (("rp", "id"), "", "expected 'id' to be non-empty string"),
        (("rp", "icon"), 3, "expected 'icon' to be 'string', got: number"),
        (("user", "name"), "", "expected 'name' to be non-empty string"),
        (("user", "id"), "not/base64", "expected 'id' to be base64url format, got: not/base64"),
        (("user", "displayName"), "", "expected 'displayName' to be non-empty string"),
        (("user", "icon"), "", "expected 'icon' to be non-empty string"),
        (("challenge",), "abc+", "expected 'challenge' to be base64url format, got: abc+"),
        (("pubKeyCredParams",), {"alg": -7}, "expected 'pubKeyCredParams' to be 'Array', got: {'alg': -7}"),
        (("pubKeyCredParams", 0, "alg"), "-7", "expected 'alg' to be 'number', got: string"),
        (("pubKeyCredParams", 1, "type"), "private-key", "credential type must be 'public-key'"),
        (("timeout",), -1, "expected 'timeout' to be positive integer"),
        (("excludeCredentials", 0, "type"), "secret", "credential type must be 'public-key'"),
        (
            ("excludeCredentials", 0, "transports"),
            ["usb", "hybrid"],
            "expected transport to be 'usb', 'nfc', or 'ble', got: hybrid",
        ),
        (
            ("authenticatorSelection", "authenticatorAttachment"),
            "roaming",
            "authenticatorAttachment must be either 'platform' or 'cross-platform'",
        ),
        (("attestation",), "enterprise", "expected attestation to be 'direct', 'none', or 'indirect'"),
        (("extensions",), "credProps", "expected 'extensions' to be 'Object', got: credProps"),
        (("rawChallenge",), "!", "expected 'rawChallenge' to be base64url format, got: !"),
    ],
)
def test_create_options_rejects(create_options, path, value, message):
    target = create_options
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value

    with _raises(message):
        CreateOptions.from_json(create_options).validate()


@pytest.mark.parametrize("key", ["rp", "user", "challenge", "pubKeyCredParams"])
def test_create_options_requires(create_options, key):
    del create_options[key]

    with pytest.raises(ValidationError, match=re.escape(f"expected '{key}' to be")):
        CreateOptions.from_json(create_options).validate()


def test_create_options_decode_binary_properties(create_options):
    msg = CreateOptions.from_json(create_options)

    msg.decode_binary_properties()

    assert msg.challenge == CHALLENGE
    assert msg.rawChallenge == RAW_CHALLENGE
    assert msg.user["id"] == USER_ID
    assert [cred["id"] for cred in msg.excludeCredentials] == [CREDENTIAL_ID, OTHER_CREDENTIAL_ID]
    assert msg.rp == create_options["rp"]


def test_create_options_decode_encode_round_trip(create_options):
    original = copy.deepcopy(create_options)
    msg = CreateOptions.from_json(create_options)

    msg.decode_binary_properties()
    msg.encode_binary_properties()

    assert msg.to_object() == original
    msg.validate()


def test_create_options_decode_requires_challenge(create_options):
    del create_options["challenge"]
    msg = CreateOptions.from_json(create_options)

    with pytest.raises(CoercionError, match=re.escape("could not coerce 'challenge' to ArrayBuffer")):
        msg.decode_binary_properties()


def test_create_options_human_string(create_options):
    rendered = CreateOptions.from_json(create_options).to_human_string()

    assert rendered.startswith('[CreateOptions] {\n    status: "ok",\n    errorMessage: "",\n    rp: {\n')
    assert "    challenge: [ArrayBuffer] (64 bytes)\n        00 01 02 03" in rendered
    assert "alg: -257," in rendered


def test_get_options_round_trip(get_options):
    msg = GetOptions.from_json(get_options)

    msg.validate()
    assert msg.to_object() == get_options


def test_get_options_minimal():
    msg = GetOptions.from_json({"status": "ok", "challenge": "AAEC"})

    msg.validate()
    assert msg.to_object() == {"status": "ok", "errorMessage": "", "challenge": "AAEC"}


@pytest.mark.parametrize(
    "key, value, message",
    [
        ("challenge", None, "expected 'challenge' to be 'string', got: object"),
        ("timeout", 1.5, "expected 'timeout' to be positive integer"),
        ("rpId", "", "expected 'rpId' to be non-empty string"),
        ("allowCredentials", "none", "expected 'allowCredentials' to be 'Array', got: none"),
        ("allowCredentials", [{"id": "AAEC"}], "credential type must be 'public-key'"),
        ("userVerification", "always", "userVerification must be 'required', 'preferred' or 'discouraged'"),
        ("extensions", [], "expected 'extensions' to be 'Object', got: []"),
        ("rawChallenge", "a b", "expected 'rawChallenge' to be base64url format, got: a b"),
    ],
)
def test_get_options_rejects(get_options, key, value, message):
    get_options[key] = value

    with _raises(message):
        GetOptions.from_json(get_options).validate()


def test_get_options_decode_encode(get_options):
    original = copy.deepcopy(get_options)
    msg = GetOptions.from_json(get_options)

    msg.decode_binary_properties()
    assert msg.challenge == CHALLENGE
    assert msg.rawChallenge == RAW_CHALLENGE
    assert msg.allowCredentials[0]["id"] == CREDENTIAL_ID

    msg.encode_binary_properties()
    assert msg.to_object() == original


def test_get_options_decode_skips_absent_optional_properties():
    msg = GetOptions.from_json({"status": "ok", "challenge": "AAEC"})

    msg.decode_binary_properties()
    assert msg.to_object() == {"status": "ok", "challenge": b"\x00\x01\x02"}

    msg.encode_binary_properties()
    assert msg.to_object() == {"status": "ok", "challenge": "AAEC"}

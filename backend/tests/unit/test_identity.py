"""Unit tests for canonical identity resolution."""

import re
import uuid

import pytest

from learnpass.domain.identity import IdentityResolver, fingerprint32, resolve_v1, resolve_v2

NAMESPACE = "1b671a64-40d5-491e-99b0-da01ff1f3341"
UUID_SHAPE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-a[0-9a-f]{3}-[0-9a-f]{12}$")


def _reference_v1(external_id: str, namespace: str) -> str:
    """Independent port of the browser implementation, using ctypes-free int32 maths."""
    text = external_id + namespace
    units = []
    for ch in text:
        cp = ord(ch)
        if cp > 0xFFFF:
            cp -= 0x10000
            units += [0xD800 + (cp >> 10), 0xDC00 + (cp & 0x3FF)]
        else:
            units.append(cp)
    h = 0
    for unit in units:
        h = (h * 31 + unit) % 2**32
    if h >= 2**31:
        h -= 2**32
    digits = "%08x" % abs(h)
    return "%s-%s-4%s-a%s-%s" % (
        digits[:8], digits[:4], digits[1:4], digits[:3], (digits[:12] + "0" * 12)[:12]
    )


# Values produced by the legacy JavaScript implementation.
@pytest.mark.parametrize(
    "external_id, expected",
    [
        ("user_123", "064e710c-064e-464e-a064-064e710c0000"),
        ("user_2abcXYZ", "2dc9e9e3-2dc9-4dc9-a2dc-2dc9e9e30000"),
        ("", "504103b2-5041-4041-a504-504103b20000"),
        ("café_ü", "0cc1d854-0cc1-4cc1-a0cc-0cc1d8540000"),
        ("user_😀", "153ecb25-153e-453e-a153-153ecb250000"),
        ("clerk|Ω", "2a0a32f0-2a0a-4a0a-a2a0-2a0a32f00000"),
    ],
)
def test_v1_matches_stored_identities(external_id: str, expected: str):
    assert resolve_v1(external_id, NAMESPACE) == expected


@pytest.mark.parametrize(
    "external_id",
    ["user_123", "", "a" * 500, "ユーザー", "𝔘𝔰𝔢𝔯", "user_2abcXYZ\n", "0"],
)
def test_v1_agrees_with_independent_implementation(external_id: str):
    assert resolve_v1(external_id, NAMESPACE) == _reference_v1(external_id, NAMESPACE)


@pytest.mark.parametrize("external_id", ["user_123", "", "𝔘𝔰𝔢𝔯", "x" * 64])
@pytest.mark.parametrize("version", ["v1", "v2"])
def test_resolve_is_deterministic_and_uuid_shaped(external_id: str, version: str):
    resolver = IdentityResolver(NAMESPACE, version)
    first = resolver.resolve(external_id)
    assert first == resolver.resolve(external_id)
    assert UUID_SHAPE.match(first)


def test_fingerprint_wraps_to_signed_32_bits():
    value = fingerprint32("z" * 1000)
    assert -(2**31) <= value < 2**31


def test_v2_uses_sha256_digest():
    assert resolve_v2("user_123", NAMESPACE) == "d910ed42-cb9d-4091-aabf-646de35e963f"


def test_v2_differs_from_v1():
    assert resolve_v1("user_123", NAMESPACE) != resolve_v2("user_123", NAMESPACE)


def test_namespace_changes_identity():
    assert resolve_v1("user_123", NAMESPACE) != resolve_v1("user_123", str(uuid.uuid4()))


def test_unknown_version_is_rejected():
    with pytest.raises(ValueError):
        IdentityResolver(NAMESPACE, "v3")


def test_internal_fault_falls_back_to_random_uuid(caplog):
    resolver = IdentityResolver(NAMESPACE)
    with caplog.at_level("ERROR"):
        result = resolver.resolve(None)  # type: ignore[arg-type]
    uuid.UUID(result)
    assert "Identity resolution failed" in caplog.text

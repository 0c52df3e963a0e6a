"""Canonical identity resolution.

Maps an external identity-provider subject id to the internal UUID-shaped
identifier every table is keyed by. This module is the only implementation
of the algorithm: the request path and the storage adapter both import it,
so the same subject can never resolve to two identities.

Two versions exist:

``v1``
    The legacy 32-bit rolling-hash fingerprint. It must stay bit-for-bit
    compatible with identities already stored, so it reproduces JavaScript
    semantics exactly: the input is walked as UTF-16 code units and the
    accumulator wraps to a signed 32-bit integer after every step. It is
    NOT collision resistant.
``v2``
    SHA-256 over the same input, formatted into the same
    ``xxxxxxxx-xxxx-4xxx-axxx-xxxxxxxxxxxx`` shape. Use it for fresh
    deployments that do not have to match v1 rows.
"""

import hashlib
import logging
import uuid

from learnpass.domain.workflow_config import DEFAULT_IDENTITY_NAMESPACE

logger = logging.getLogger(__name__)

RESOLVER_VERSIONS = ("v1", "v2")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_code_units(text: str) -> list[int]:
    data = text.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(data[i : i + 2], "little") for i in range(0, len(data), 2)]


def fingerprint32(text: str) -> int:
    """Rolling hash ``h = (h << 5) - h + code`` wrapped to signed 32 bits."""
    h = 0
    for code in _utf16_code_units(text):
        h = _to_int32((h << 5) - h + code)
    return h


def _format_legacy(hex_digits: str) -> str:
    return (
        f"{hex_digits[0:8]}-{hex_digits[0:4]}-4{hex_digits[1:4]}"
        f"-a{hex_digits[0:3]}-{hex_digits[0:12].ljust(12, '0')}"
    )


def resolve_v1(external_id: str, namespace: str = DEFAULT_IDENTITY_NAMESPACE) -> str:
    hex_digits = format(abs(fingerprint32(external_id + namespace)), "x").zfill(8)
    return _format_legacy(hex_digits)


def resolve_v2(external_id: str, namespace: str = DEFAULT_IDENTITY_NAMESPACE) -> str:
    digest = hashlib.sha256((external_id + namespace).encode("utf-8")).hexdigest()
    return (
        f"{digest[0:8]}-{digest[8:12]}-4{digest[13:16]}"
        f"-a{digest[17:20]}-{digest[20:32]}"
    )


class IdentityResolver:
    """Resolves external subject ids with a fixed namespace and version."""

    def __init__(
        self,
        namespace: str = DEFAULT_IDENTITY_NAMESPACE,
        version: str = "v1",
    ):
        if version not in RESOLVER_VERSIONS:
            raise ValueError(f"Unknown identity resolver version '{version}'")
        self._namespace = namespace
        self._version = version

    @property
    def version(self) -> str:
        return self._version

    def resolve(self, external_id: str) -> str:
        """Return the canonical identity for ``external_id``.

        The only failure path is an internal fault (e.g. a non-string
        input slipping past validation). In that case a random UUID is
        returned, which is NOT deterministic and splits the subject's
        data; the event is logged at ERROR so it can be reconciled.
        """
        try:
            if self._version == "v2":
                return resolve_v2(external_id, self._namespace)
            return resolve_v1(external_id, self._namespace)
        except (TypeError, AttributeError, UnicodeError) as exc:
            fallback = str(uuid.uuid4())
            logger.error(
                "Identity resolution failed for %r, using random id %s: %s",
                external_id, fallback, exc,
            )
            return fallback

"""Single-field parsers used while translating a node.

Every parser is total: the outcome of a parse is always a
:class:`FieldResult`, never an exception, so one bad field cannot stop the
rest of the node from being translated.
"""

from __future__ import annotations

import base64
import binascii
import ipaddress
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

LOG = logging.getLogger(__name__)

T = TypeVar("T")

# WireGuard keys are 32 raw bytes, exchanged as standard base64.
MESH_KEY_LENGTH = 32
MESH_KEY_ENCODED_LENGTH = 44


class FieldKind(Enum):
    IP = "ip"
    CIDR_OR_IP = "cidr-or-ip"
    CIDR = "cidr"
    IDENTIFIER = "identifier"
    MESH_PUBLIC_KEY = "mesh-public-key"


class FieldStatus(Enum):
    PARSED = "parsed"
    ABSENT = "absent"
    INVALID = "invalid"


@dataclass(frozen=True)
class FieldResult(Generic[T]):
    """Outcome of parsing one field.

    ``value`` is only set for :attr:`FieldStatus.PARSED`; both ``ABSENT`` and
    ``INVALID`` translate to a delete, but only ``INVALID`` carries an
    ``error``.
    """

    status: FieldStatus
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def parsed(cls, value: T) -> "FieldResult[T]":
        return cls(FieldStatus.PARSED, value=value)

    @classmethod
    def absent(cls) -> "FieldResult[T]":
        return cls(FieldStatus.ABSENT)

    @classmethod
    def invalid(cls, error: str) -> "FieldResult[T]":
        return cls(FieldStatus.INVALID, error=error)

    @property
    def ok(self) -> bool:
        return self.status is FieldStatus.PARSED

    @property
    def failed(self) -> bool:
        return self.status is FieldStatus.INVALID


def _parse_ip(raw: str):
    if "/" in raw:
        return ipaddress.ip_interface(raw).ip
    return ipaddress.ip_address(raw)


def _parse_cidr_or_ip(raw: str):
    interface = ipaddress.ip_interface(raw)
    LOG.debug("Parsed %s as ip=%s cidr=%s", raw, interface.ip, interface.network)
    return interface.ip


def _parse_cidr(raw: str):
    if "/" not in raw:
        raise ValueError("missing prefix length")
    return ipaddress.ip_network(raw, strict=False)


def _parse_identifier(raw: str) -> str:
    value = raw.strip()
    if not value:
        raise ValueError("identifier is blank")
    return value


def _parse_mesh_key(raw: str) -> str:
    if len(raw) != MESH_KEY_ENCODED_LENGTH:
        raise ValueError(
            f"expected {MESH_KEY_ENCODED_LENGTH} base64 characters, got {len(raw)}"
        )
    try:
        decoded = base64.b64decode(raw, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"not valid base64: {exc}") from exc
    if len(decoded) != MESH_KEY_LENGTH:
        raise ValueError(f"expected a {MESH_KEY_LENGTH} byte key, got {len(decoded)}")
    return raw


_PARSERS: Dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.IP: _parse_ip,
    FieldKind.CIDR_OR_IP: _parse_cidr_or_ip,
    FieldKind.CIDR: _parse_cidr,
    FieldKind.IDENTIFIER: _parse_identifier,
    FieldKind.MESH_PUBLIC_KEY: _parse_mesh_key,
}


def parse(
    kind: FieldKind,
    raw: Optional[str],
    *,
    field: str = "",
    version: Optional[int] = None,
) -> FieldResult:
    """Parse ``raw`` as a field of ``kind``.

    ``field`` names the source field in diagnostics.  When ``version`` is
    given, addresses of the other IP family are rejected.
    """

    label = field or kind.value
    if not raw:
        return FieldResult.absent()

    try:
        value = _PARSERS[kind](raw)
    except ValueError as exc:
        LOG.warning("Failed to parse %s %r as %s: %s", label, raw, kind.value, exc)
        return FieldResult.invalid(f"failed to parse {raw!r} as {kind.value}: {exc}")

    if version is not None and getattr(value, "version", version) != version:
        LOG.warning("Ignoring %s %r: not an IPv%d value", label, raw, version)
        return FieldResult.invalid(f"{raw!r} is not an IPv{version} value")

    LOG.debug("Parsed %s: %s", label, value)
    return FieldResult.parsed(value)

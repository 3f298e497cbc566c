"""Translate node change events into dataplane records.

:class:`NodeUpdateProcessor` takes one ``KVPair`` describing a node (or its
deletion) and produces the ordered list of low-level records the dataplane
agent consumes.  Fields are parsed independently: a field that fails to parse
is published as a delete and reported through the returned
:class:`~node_translator.errors.NodeUpdateError`, while every other record is
still produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, List, NamedTuple, Optional, Tuple

from . import fields
from .config import ProcessorConfig
from .errors import FieldFailure, KeyMismatchError, NodeUpdateError, ValueTypeError
from .fields import FieldKind, FieldResult
from .model import (
    IPIP_TUNNEL_ADDR,
    IPV4_VXLAN_TUNNEL_ADDR,
    IPV6_VXLAN_TUNNEL_ADDR,
    KIND_NODE,
    VXLAN_TUNNEL_MAC_V4_ADDR,
    VXLAN_TUNNEL_MAC_V6_ADDR,
    AddressBlock,
    AddressBlockKey,
    AddressType,
    IPAddress,
    KVPair,
    MeshConfig,
    MeshConfigKey,
    NodeDescriptor,
    PrimaryAddressKey,
    ResourceKey,
    TunnelConfigKey,
    host_affinity,
)
from .tracker import NodeCIDRTracker

LOG = logging.getLogger(__name__)

# Node addresses consulted, in order, when BGP does not provide one.
ADDRESS_FALLBACK_ORDER = (AddressType.INTERNAL, AddressType.EXTERNAL)


class ProcessResult(NamedTuple):
    records: List[KVPair]
    error: Optional[NodeUpdateError]


@dataclass
class _Outcomes:
    """Field failures collected while translating a single event."""

    failures: List[FieldFailure] = field(default_factory=list)

    def take(self, name: str, result: FieldResult) -> Any:
        if result.failed:
            self.failures.append(FieldFailure(name, result.error or "invalid value"))
        return result.value

    def parse(self, kind: FieldKind, name: str, raw: Optional[str], **kwargs: Any) -> Any:
        return self.take(name, fields.parse(kind, raw, field=name, **kwargs))

    def error_for(self, node: str) -> Optional[NodeUpdateError]:
        if not self.failures:
            return None
        return NodeUpdateError(node, self.failures)


@dataclass
class _NodeFields:
    """Translated per-node values; ``None`` publishes a delete."""

    ipv4: Optional[IPAddress] = None
    ipv6: Optional[IPAddress] = None
    ipip_tunnel: Optional[str] = None
    vxlan_tunnel_v4: Optional[str] = None
    vxlan_tunnel_v6: Optional[str] = None
    vxlan_mac_v4: Optional[str] = None
    vxlan_mac_v6: Optional[str] = None
    mesh: Optional[MeshConfig] = None


def _as_text(value: Optional[Any]) -> Optional[str]:
    return None if value is None else str(value)


class NodeUpdateProcessor:
    """Convert node resources into per-setting dataplane records.

    One instance owns one :class:`NodeCIDRTracker`; pass a tracker in to share
    block state between processors.
    """

    def __init__(
        self,
        config: Optional[ProcessorConfig] = None,
        tracker: Optional[NodeCIDRTracker] = None,
    ) -> None:
        self._config = config or ProcessorConfig()
        self._tracker = tracker or NodeCIDRTracker()

    @property
    def config(self) -> ProcessorConfig:
        return self._config

    @property
    def tracker(self) -> NodeCIDRTracker:
        return self._tracker

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def process(self, kvp: KVPair) -> ProcessResult:
        """Translate ``kvp`` into its ordered list of records.

        Raises :class:`KeyMismatchError` or :class:`ValueTypeError` when the
        event does not describe a node at all.  Anything less severe is
        returned as the ``error`` member next to the records.
        """

        name = self._extract_name(kvp)
        node = kvp.value
        if node is not None and not isinstance(node, NodeDescriptor):
            raise ValueTypeError(
                f"Incorrect value type {type(node).__name__} - expecting resource of kind {KIND_NODE}"
            )

        outcomes = _Outcomes()
        values = self._translate(node, outcomes) if node is not None else _NodeFields()
        records = self._node_records(name, kvp, values)
        if self._config.use_pod_cidr:
            records.extend(self._block_records(name, node, kvp.revision, outcomes))

        error = outcomes.error_for(name)
        if error is not None:
            LOG.warning("Partial translation of node %s: %s", name, error)
        return ProcessResult(records, error)

    def on_syncer_starting(self) -> None:
        LOG.debug("Sync starting called on node update processor")

    # ------------------------------------------------------------------
    # Field extraction
    # ------------------------------------------------------------------
    @staticmethod
    def _extract_name(kvp: KVPair) -> str:
        key = kvp.key
        if not isinstance(key, ResourceKey) or key.kind != KIND_NODE:
            raise KeyMismatchError(
                f"Incorrect key type {key!r} - expecting resource of kind {KIND_NODE}"
            )
        return key.name

    def _translate(self, node: NodeDescriptor, outcomes: _Outcomes) -> _NodeFields:
        values = _NodeFields()
        values.ipv4 = self._resolve_address(node, 4, outcomes)
        values.ipv6 = self._resolve_address(node, 6, outcomes)

        if node.bgp is not None:
            values.ipip_tunnel = _as_text(
                outcomes.parse(FieldKind.IP, "bgp.ipv4_ipip_tunnel_addr", node.bgp.ipv4_ipip_tunnel_addr)
            )

        values.vxlan_tunnel_v4 = _as_text(
            outcomes.parse(FieldKind.IP, "ipv4_vxlan_tunnel_addr", node.ipv4_vxlan_tunnel_addr)
        )
        values.vxlan_tunnel_v6 = _as_text(
            outcomes.parse(FieldKind.IP, "ipv6_vxlan_tunnel_addr", node.ipv6_vxlan_tunnel_addr)
        )
        values.vxlan_mac_v4 = outcomes.parse(FieldKind.IDENTIFIER, "vxlan_tunnel_mac_v4", node.vxlan_tunnel_mac_v4)
        values.vxlan_mac_v6 = outcomes.parse(FieldKind.IDENTIFIER, "vxlan_tunnel_mac_v6", node.vxlan_tunnel_mac_v6)
        values.mesh = self._mesh_config(node, outcomes)
        return values

    @staticmethod
    def _address_candidates(node: NodeDescriptor, version: int) -> Iterator[Tuple[str, str, bool]]:
        """Yield ``(field, raw, reportable)`` in priority order for ``version``."""

        if node.bgp is not None:
            name = f"bgp.ipv{version}_address"
            yield name, getattr(node.bgp, f"ipv{version}_address"), True
        for address_type in ADDRESS_FALLBACK_ORDER:
            for address in node.addresses:
                if address.type is address_type:
                    yield f"addresses[{address_type.value}]", address.address, False

    def _resolve_address(
        self, node: NodeDescriptor, version: int, outcomes: _Outcomes
    ) -> Optional[IPAddress]:
        for name, raw, reportable in self._address_candidates(node, version):
            if reportable:
                result = fields.parse(FieldKind.CIDR_OR_IP, raw, field=name, version=version)
                outcomes.take(name, result)
            else:
                result = fields.parse(FieldKind.CIDR_OR_IP, raw, field=name)
                if result.ok and result.value.version != version:
                    continue
            if result.ok:
                LOG.debug("Node %s IPv%d address %s from %s", node.name, version, result.value, name)
                return result.value
        return None

    def _mesh_config(self, node: NodeDescriptor, outcomes: _Outcomes) -> Optional[MeshConfig]:
        interface_address = None
        if node.mesh is not None:
            interface_address = outcomes.parse(
                FieldKind.IP, "mesh.interface_address", node.mesh.interface_address
            )
        public_key = outcomes.parse(FieldKind.MESH_PUBLIC_KEY, "mesh_public_key", node.mesh_public_key)
        if interface_address is None and public_key is None:
            return None
        return MeshConfig(interface_address=interface_address, public_key=public_key)

    # ------------------------------------------------------------------
    # Record assembly
    # ------------------------------------------------------------------
    def _node_records(self, name: str, kvp: KVPair, values: _NodeFields) -> List[KVPair]:
        revision = kvp.revision
        records = [KVPair(PrimaryAddressKey(hostname=name), values.ipv4, revision)]
        if self._config.emit_ipv6_address:
            records.append(KVPair(PrimaryAddressKey(hostname=name, ip_version=6), values.ipv6, revision))

        tunnel_values = (
            (IPIP_TUNNEL_ADDR, values.ipip_tunnel),
            (IPV4_VXLAN_TUNNEL_ADDR, values.vxlan_tunnel_v4),
            (IPV6_VXLAN_TUNNEL_ADDR, values.vxlan_tunnel_v6),
            (VXLAN_TUNNEL_MAC_V6_ADDR, values.vxlan_mac_v6),
            (VXLAN_TUNNEL_MAC_V4_ADDR, values.vxlan_mac_v4),
        )
        records.extend(
            KVPair(TunnelConfigKey(hostname=name, name=config_name), value, revision)
            for config_name, value in tunnel_values
        )

        # The original value is forwarded untouched: consumers rely on a
        # ``None`` value here to detect the node deletion itself.
        records.append(KVPair(ResourceKey(name=name, kind=KIND_NODE), kvp.value, revision))
        records.append(KVPair(MeshConfigKey(node_name=name), values.mesh, revision))
        return records

    def _block_records(
        self,
        name: str,
        node: Optional[NodeDescriptor],
        revision: str,
        outcomes: _Outcomes,
    ) -> List[KVPair]:
        current = list(dict.fromkeys(node.pod_cidrs)) if node is not None else []
        removed = self._tracker.reconcile(name, current)
        LOG.debug("Node %s current CIDRs %s, removed CIDRs %s", name, current, removed)
        if node is None and self._config.prune_cidrs_on_delete:
            self._tracker.forget(name)

        records: List[KVPair] = []
        # Blocks that never parsed were reported when they arrived.
        for raw in removed:
            result = fields.parse(FieldKind.CIDR, raw, field="removed pod CIDR")
            if result.ok:
                records.append(KVPair(AddressBlockKey(cidr=result.value), None, revision))

        affinity = host_affinity(name)
        for raw in current:
            cidr = outcomes.parse(FieldKind.CIDR, f"pod_cidrs[{raw}]", raw)
            if cidr is not None:
                records.append(
                    KVPair(AddressBlockKey(cidr=cidr), AddressBlock(cidr=cidr, affinity=affinity), revision)
                )
        return records

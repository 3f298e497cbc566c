"""Data structures shared by the node translator.

The input side is :class:`NodeDescriptor`, a flattened view of the node
resource.  The output side is a list of :class:`KVPair` records whose keys
address individual settings consumed by the dataplane agent.  A ``KVPair``
with ``value=None`` is a delete.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

KIND_NODE = "Node"

IPIP_TUNNEL_ADDR = "IpInIpTunnelAddr"
IPV4_VXLAN_TUNNEL_ADDR = "IPv4VXLANTunnelAddr"
IPV6_VXLAN_TUNNEL_ADDR = "IPv6VXLANTunnelAddr"
VXLAN_TUNNEL_MAC_V4_ADDR = "VXLANTunnelMACV4Addr"
VXLAN_TUNNEL_MAC_V6_ADDR = "VXLANTunnelMACV6Addr"


class AddressType(Enum):
    """Classes of addresses reported on a node."""

    INTERNAL = "InternalIP"
    EXTERNAL = "ExternalIP"


@dataclass(frozen=True)
class NodeAddress:
    address: str
    type: AddressType


@dataclass(frozen=True)
class BGPSpec:
    """BGP settings of a node; empty strings mean "not set"."""

    ipv4_address: str = ""
    ipv6_address: str = ""
    ipv4_ipip_tunnel_addr: str = ""


@dataclass(frozen=True)
class MeshSpec:
    """Encrypted mesh (WireGuard) interface settings."""

    interface_address: str = ""


@dataclass(frozen=True)
class NodeDescriptor:
    """High-level node description fed to the translator.

    Attributes
    ----------
    name:
        Unique node name, also used as hostname in the output keys.
    bgp / mesh:
        Optional configuration blocks; ``None`` when the node has none.
    addresses:
        Addresses reported by the node, used when BGP does not pin one.
    mesh_public_key:
        Public key published in the node status, independent of ``mesh``.
    pod_cidrs:
        Address blocks currently assigned to the node.
    """

    name: str
    bgp: Optional[BGPSpec] = None
    addresses: Sequence[NodeAddress] = ()
    ipv4_vxlan_tunnel_addr: str = ""
    ipv6_vxlan_tunnel_addr: str = ""
    vxlan_tunnel_mac_v4: str = ""
    vxlan_tunnel_mac_v6: str = ""
    mesh: Optional[MeshSpec] = None
    mesh_public_key: str = ""
    pod_cidrs: Sequence[str] = ()


@dataclass(frozen=True)
class ResourceKey:
    name: str
    kind: str


@dataclass(frozen=True)
class PrimaryAddressKey:
    hostname: str
    ip_version: int = 4


@dataclass(frozen=True)
class TunnelConfigKey:
    hostname: str
    name: str


@dataclass(frozen=True)
class MeshConfigKey:
    node_name: str


@dataclass(frozen=True)
class AddressBlockKey:
    cidr: IPNetwork


Key = Union[ResourceKey, PrimaryAddressKey, TunnelConfigKey, MeshConfigKey, AddressBlockKey]


@dataclass(frozen=True)
class MeshConfig:
    """Mesh interface settings; either field may be missing but not both."""

    interface_address: Optional[IPAddress] = None
    public_key: Optional[str] = None


@dataclass(frozen=True)
class AddressBlock:
    cidr: IPNetwork
    affinity: str


def host_affinity(hostname: str) -> str:
    return f"host:{hostname}"


@dataclass(frozen=True)
class KVPair:
    """A single keyed record; ``value=None`` requests deletion of ``key``."""

    key: Key
    value: Any = None
    revision: str = ""

    @property
    def is_delete(self) -> bool:
        return self.value is None

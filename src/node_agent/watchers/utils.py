from __future__ import annotations

from typing import Any, List, Mapping, Optional

from node_translator.model import AddressType, BGPSpec, MeshSpec, NodeAddress, NodeDescriptor


def _text(entry: Mapping[str, Any], key: str) -> str:
    value = entry.get(key)
    return "" if value is None else str(value)


def _section(entry: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
    value = entry.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError(f"'{key}' must be a mapping")
    return value


def _addresses(entries: Any) -> List[NodeAddress]:
    if not isinstance(entries, list):
        raise ValueError("'addresses' must be a list")
    addresses = []
    for entry in entries:
        if not isinstance(entry, Mapping) or "address" not in entry:
            raise ValueError("node address entries need an 'address' key")
        addresses.append(
            NodeAddress(
                address=str(entry["address"]),
                type=AddressType(entry.get("type", AddressType.INTERNAL.value)),
            )
        )
    return addresses


def node_from_dict(entry: Mapping[str, Any]) -> NodeDescriptor:
    """Build a :class:`NodeDescriptor` from a plain mapping.

    Raises ``ValueError`` when the mapping is structurally wrong; field values
    themselves are passed through untouched and validated by the processor.
    """

    if not isinstance(entry, Mapping):
        raise ValueError("node entry must be a mapping")
    name = entry.get("name")
    if not name:
        raise ValueError("node entry missing 'name'")

    bgp_section = _section(entry, "bgp")
    bgp = None
    if bgp_section is not None:
        bgp = BGPSpec(
            ipv4_address=_text(bgp_section, "ipv4_address"),
            ipv6_address=_text(bgp_section, "ipv6_address"),
            ipv4_ipip_tunnel_addr=_text(bgp_section, "ipv4_ipip_tunnel_addr"),
        )

    mesh_section = _section(entry, "mesh")
    mesh = None
    if mesh_section is not None:
        mesh = MeshSpec(interface_address=_text(mesh_section, "interface_address"))

    pod_cidrs = entry.get("pod_cidrs", [])
    if not isinstance(pod_cidrs, list):
        raise ValueError("'pod_cidrs' must be a list")

    return NodeDescriptor(
        name=str(name),
        bgp=bgp,
        addresses=tuple(_addresses(entry.get("addresses", []))),
        ipv4_vxlan_tunnel_addr=_text(entry, "ipv4_vxlan_tunnel_addr"),
        ipv6_vxlan_tunnel_addr=_text(entry, "ipv6_vxlan_tunnel_addr"),
        vxlan_tunnel_mac_v4=_text(entry, "vxlan_tunnel_mac_v4"),
        vxlan_tunnel_mac_v6=_text(entry, "vxlan_tunnel_mac_v6"),
        mesh=mesh,
        mesh_public_key=_text(entry, "mesh_public_key"),
        pod_cidrs=tuple(str(c) for c in pod_cidrs),
    )

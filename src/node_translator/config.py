"""Configuration knobs for the node update processor.

Kept as a plain dataclass so the processor does not depend on any particular
configuration loader; the agent builds it from YAML and the syncer from
oslo.config.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProcessorConfig:
    """Behaviour switches for :class:`~node_translator.processor.NodeUpdateProcessor`.

    Attributes
    ----------
    use_pod_cidr:
        Emit address block records from the node's pod CIDRs.  Disable when
        block allocation is handled by a separate IPAM.
    prune_cidrs_on_delete:
        Drop the tracked CIDRs of a node once its deletion has been
        translated.  Off by default, which keeps the entry (emptied) around.
    emit_ipv6_address:
        Also publish the resolved IPv6 primary address.
    """

    use_pod_cidr: bool = True
    prune_cidrs_on_delete: bool = False
    emit_ipv6_address: bool = False

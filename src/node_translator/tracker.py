"""Per-node tracking of assigned pod CIDRs."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Iterable, List

LOG = logging.getLogger(__name__)


class NodeCIDRTracker:
    """Remember the CIDRs last seen for each node and report removals.

    Each call to :meth:`reconcile` supplies the full current set for a node;
    the tracker answers with the CIDRs that were present on the previous call
    but are gone now.  CIDRs are compared as plain strings and kept in first
    seen order so the removal list is deterministic.

    Entries are never evicted implicitly.  Callers that want to bound memory
    for deleted nodes use :meth:`forget`.
    """

    def __init__(self) -> None:
        self._cidrs: Dict[str, List[str]] = {}
        self._lock = Lock()

    def reconcile(self, node: str, current: Iterable[str]) -> List[str]:
        desired = list(dict.fromkeys(current))
        with self._lock:
            previous = self._cidrs.get(node)
            if previous is None:
                if desired:
                    self._cidrs[node] = desired
                return []

            wanted = set(desired)
            removed = [cidr for cidr in previous if cidr not in wanted]
            self._cidrs[node] = desired

        if removed:
            LOG.debug("Node %s no longer holds CIDRs %s", node, removed)
        return removed

    def forget(self, node: str) -> List[str]:
        with self._lock:
            dropped = self._cidrs.pop(node, [])
        if dropped:
            LOG.debug("Dropped CIDR tracking for node %s", node)
        return dropped

    def lookup(self, node: str) -> List[str]:
        with self._lock:
            return list(self._cidrs.get(node, ()))

    def nodes(self) -> List[str]:
        with self._lock:
            return list(self._cidrs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cidrs)

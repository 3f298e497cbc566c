"""File-based node watcher."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Event, Thread
from typing import Dict, Set, Tuple

import yaml

from node_syncer import ProcessorRegistry
from node_translator.model import KIND_NODE, KVPair, NodeDescriptor, ResourceKey

from .utils import node_from_dict

LOG = logging.getLogger(__name__)


def _load_payload(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in (".yaml", ".yml"):
        return yaml.safe_load(text) or {}
    return json.loads(text)


def _extract_state(payload: dict) -> Tuple[Dict[str, NodeDescriptor], Set[str]]:
    """Return the parsed nodes and the names of entries that failed to parse."""

    if not isinstance(payload, dict):
        raise ValueError("nodes file must contain a mapping")
    nodes = payload.get("nodes")
    if nodes is None:
        raise ValueError("nodes file missing 'nodes' key")
    if not isinstance(nodes, list):
        raise ValueError("'nodes' must be a list")

    state: Dict[str, NodeDescriptor] = {}
    rejected: Set[str] = set()
    for entry in nodes:
        try:
            node = node_from_dict(entry)
        except ValueError as exc:
            LOG.warning("skipping malformed node entry %r: %s", entry, exc)
            if isinstance(entry, dict) and entry.get("name"):
                rejected.add(str(entry["name"]))
            continue
        state[node.name] = node
    return state, rejected


class FileNodeWatcher(Thread):
    """Poll a JSON/YAML nodes file and publish node change events."""

    def __init__(
        self,
        registry: ProcessorRegistry,
        path: Path,
        interval: float,
        stop_event: Event,
    ) -> None:
        super().__init__(daemon=True)
        self._registry = registry
        self._path = Path(path)
        self._interval = interval
        self._stop_event = stop_event
        self._state: Dict[str, NodeDescriptor] = {}

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll()
            except Exception:  # pragma: no cover - logged below
                LOG.exception("file watcher encountered an error")
            self._stop_event.wait(self._interval)

    def poll(self) -> None:
        if not self._path.exists():
            LOG.debug("nodes file %s does not exist yet", self._path)
            return

        try:
            revision = str(self._path.stat().st_mtime_ns)
            payload = _load_payload(self._path)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
            LOG.warning("failed to read nodes file %s: %s", self._path, exc)
            return

        try:
            desired, rejected = _extract_state(payload)
        except ValueError as exc:
            LOG.warning("invalid nodes file %s: %s", self._path, exc)
            return

        # A malformed entry keeps its last good state instead of reading as a delete.
        for name in rejected:
            if name not in desired and name in self._state:
                desired[name] = self._state[name]

        for name, node in desired.items():
            if self._state.get(name) != node:
                LOG.debug("node %s updated", name)
                self._registry.handle(KVPair(ResourceKey(name, KIND_NODE), node, revision))

        for name in sorted(set(self._state) - set(desired)):
            LOG.debug("node %s removed", name)
            self._registry.handle(KVPair(ResourceKey(name, KIND_NODE), None, revision))

        self._state = desired

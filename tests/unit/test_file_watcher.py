import ipaddress
import json
import logging
from pathlib import Path
from threading import Event

from node_agent.watchers.file import FileNodeWatcher
from node_agent.watchers.utils import node_from_dict
from node_syncer import ProcessorRegistry, UpdateProcessor, build_node_processor
from node_translator.model import (
    KIND_NODE,
    AddressType,
    KVPair,
    PrimaryAddressKey,
    ResourceKey,
)
from node_translator.processor import ProcessResult


class RecordingProcessor(UpdateProcessor):
    def __init__(self):
        self.events: list[KVPair] = []

    def process(self, kvp):
        self.events.append(kvp)
        return ProcessResult([], None)

    def on_syncer_starting(self):
        pass


def write_nodes(path: Path, nodes) -> None:
    path.write_text(json.dumps({"nodes": nodes}))


def build_watcher(registry: ProcessorRegistry, path: Path) -> FileNodeWatcher:
    return FileNodeWatcher(
        registry=registry,
        path=path,
        interval=0.1,
        stop_event=Event(),
    )


def test_node_from_dict():
    node = node_from_dict(
        {
            "name": "node1",
            "bgp": {"ipv4_address": "10.0.0.1/24"},
            "addresses": [{"address": "203.0.113.5", "type": "ExternalIP"}],
            "mesh": {"interface_address": "192.168.0.1"},
            "pod_cidrs": ["10.244.1.0/24"],
        }
    )

    assert node.name == "node1"
    assert node.bgp.ipv4_address == "10.0.0.1/24"
    assert node.bgp.ipv6_address == ""
    assert node.addresses[0].type is AddressType.EXTERNAL
    assert node.mesh.interface_address == "192.168.0.1"
    assert node.pod_cidrs == ("10.244.1.0/24",)
    assert node.vxlan_tunnel_mac_v4 == ""


def test_file_watcher_publishes_changes(tmp_path: Path):
    nodes_file = tmp_path / "nodes.json"
    write_nodes(nodes_file, [{"name": "node1", "pod_cidrs": ["10.244.1.0/24"]}])

    recorder = RecordingProcessor()
    registry = ProcessorRegistry()
    registry.register(KIND_NODE, recorder)
    watcher = build_watcher(registry, nodes_file)

    watcher.poll()
    assert [e.key for e in recorder.events] == [ResourceKey("node1", KIND_NODE)]
    assert recorder.events[0].value.pod_cidrs == ("10.244.1.0/24",)

    recorder.events.clear()
    watcher.poll()
    assert recorder.events == []

    write_nodes(
        nodes_file,
        [
            {"name": "node1", "pod_cidrs": ["10.244.1.0/24", "10.244.2.0/24"]},
            {"name": "node2"},
        ],
    )
    watcher.poll()
    assert [e.key.name for e in recorder.events] == ["node1", "node2"]

    recorder.events.clear()
    write_nodes(nodes_file, [{"name": "node2"}])
    watcher.poll()
    assert len(recorder.events) == 1
    assert recorder.events[0].key == ResourceKey("node1", KIND_NODE)
    assert recorder.events[0].value is None


def test_file_watcher_skips_malformed_entries(tmp_path: Path):
    nodes_file = tmp_path / "nodes.json"
    write_nodes(nodes_file, [{"pod_cidrs": []}, {"name": "node1", "pod_cidrs": "10.0.0.0/8"}, {"name": "node2"}])

    recorder = RecordingProcessor()
    registry = ProcessorRegistry()
    registry.register(KIND_NODE, recorder)

    build_watcher(registry, nodes_file).poll()

    assert [e.key.name for e in recorder.events] == ["node2"]


def test_file_watcher_ignores_unparseable_file(tmp_path: Path):
    nodes_file = tmp_path / "nodes.json"
    nodes_file.write_text("{not json")

    recorder = RecordingProcessor()
    registry = ProcessorRegistry()
    registry.register(KIND_NODE, recorder)

    watcher = build_watcher(registry, nodes_file)
    watcher.poll()
    build_watcher(registry, tmp_path / "missing.json").poll()

    assert recorder.events == []


def test_file_watcher_end_to_end_with_yaml(tmp_path: Path):
    nodes_file = tmp_path / "nodes.yaml"
    nodes_file.write_text(
        """
nodes:
  - name: node1
    bgp:
      ipv4_address: 10.0.0.1/24
    pod_cidrs:
      - 10.244.1.0/24
"""
    )

    registry = ProcessorRegistry()
    registry.register(KIND_NODE, build_node_processor())
    delivered: list[list[KVPair]] = []
    registry.add_sink(delivered.append)

    build_watcher(registry, nodes_file).poll()

    assert len(delivered) == 1
    records = delivered[0]
    assert records[0].key == PrimaryAddressKey("node1")
    assert records[0].value == ipaddress.ip_address("10.0.0.1")
    assert {r.revision for r in records} == {str(nodes_file.stat().st_mtime_ns)}


def test_file_watcher_keeps_node_when_entry_turns_malformed(tmp_path: Path):
    nodes_file = tmp_path / "nodes.json"
    write_nodes(nodes_file, [{"name": "node1", "pod_cidrs": ["10.244.1.0/24"]}])

    recorder = RecordingProcessor()
    registry = ProcessorRegistry()
    registry.register(KIND_NODE, recorder)
    watcher = build_watcher(registry, nodes_file)
    watcher.poll()

    recorder.events.clear()
    write_nodes(nodes_file, [{"name": "node1", "pod_cidrs": "10.244.1.0/24"}])
    watcher.poll()
    watcher.poll()
    assert recorder.events == []

    write_nodes(nodes_file, [])
    watcher.poll()
    assert [(e.key.name, e.value) for e in recorder.events] == [("node1", None)]


def test_file_watcher_skips_unreadable_file(tmp_path: Path, caplog):
    nodes_path = tmp_path / "nodes.json"
    nodes_path.mkdir()

    recorder = RecordingProcessor()
    registry = ProcessorRegistry()
    registry.register(KIND_NODE, recorder)

    with caplog.at_level(logging.WARNING, logger="node_agent.watchers.file"):
        build_watcher(registry, nodes_path).poll()

    assert recorder.events == []
    assert "failed to read nodes file" in caplog.text

from pathlib import Path

import pytest

from node_agent.config import load_config
from node_translator.config import ProcessorConfig


def test_load_config(tmp_path: Path):
    config_path = tmp_path / "agent.yaml"
    config_path.write_text(
        """
processor:
  use_pod_cidr: true
  prune_cidrs_on_delete: true
watchers:
  - type: file
    path: /etc/node-agent/nodes.json
    interval: 2
  - type: file
    path: /etc/node-agent/more-nodes.yaml
    options:
      note: lab
"""
    )

    cfg = load_config(config_path)

    assert cfg.processor == ProcessorConfig(prune_cidrs_on_delete=True)
    assert len(cfg.watchers) == 2
    watcher = cfg.watchers[0]
    assert watcher.type == "file"
    assert watcher.path == Path("/etc/node-agent/nodes.json")
    assert watcher.interval == pytest.approx(2.0)
    assert watcher.options == {}
    assert cfg.watchers[1].interval == pytest.approx(5.0)
    assert cfg.watchers[1].options == {"note": "lab"}


def test_empty_config_uses_defaults(tmp_path: Path):
    config_path = tmp_path / "agent.yaml"
    config_path.write_text("")

    cfg = load_config(config_path)

    assert cfg.processor == ProcessorConfig()
    assert list(cfg.watchers) == []


def test_rejects_unknown_processor_option(tmp_path: Path):
    config_path = tmp_path / "agent.yaml"
    config_path.write_text("processor:\n  use_pod_cidrs: false\n")

    with pytest.raises(ValueError):
        load_config(config_path)


def test_rejects_non_list_watchers(tmp_path: Path):
    config_path = tmp_path / "agent.yaml"
    config_path.write_text("watchers:\n  type: file\n")

    with pytest.raises(ValueError):
        load_config(config_path)

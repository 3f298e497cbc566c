"""YAML configuration loader for the node agent."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence

import yaml

from node_translator.config import ProcessorConfig


@dataclass
class WatcherConfig:
    type: str
    path: Path
    interval: float = 5.0
    options: dict = field(default_factory=dict)


@dataclass
class AgentConfig:
    processor: ProcessorConfig = field(default_factory=ProcessorConfig)
    watchers: Sequence[WatcherConfig] = field(default_factory=list)


def _parse_processor(section: dict) -> ProcessorConfig:
    if not isinstance(section, dict):
        raise ValueError("'processor' section must be a mapping")
    unknown = set(section) - {"use_pod_cidr", "prune_cidrs_on_delete", "emit_ipv6_address"}
    if unknown:
        raise ValueError(f"Unknown processor options: {', '.join(sorted(unknown))}")

    return ProcessorConfig(
        use_pod_cidr=bool(section.get("use_pod_cidr", True)),
        prune_cidrs_on_delete=bool(section.get("prune_cidrs_on_delete", False)),
        emit_ipv6_address=bool(section.get("emit_ipv6_address", False)),
    )


def _parse_watchers(entries: Iterable[dict]) -> List[WatcherConfig]:
    watchers: List[WatcherConfig] = []
    for entry in entries:
        if "type" not in entry:
            raise ValueError("watcher entry missing 'type'")
        options = entry.get("options", {})
        if not isinstance(options, dict):
            raise ValueError("watcher 'options' must be a mapping if provided")
        watchers.append(
            WatcherConfig(
                type=str(entry["type"]),
                path=Path(entry.get("path", ".")),
                interval=float(entry.get("interval", entry.get("poll_interval", 5.0))),
                options=options,
            )
        )
    return watchers


def load_config(path: Path) -> AgentConfig:
    data = yaml.safe_load(path.read_text())
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Agent configuration must be a mapping")

    processor = _parse_processor(data.get("processor") or {})

    watchers_section = data.get("watchers", [])
    if not isinstance(watchers_section, list):
        raise ValueError("'watchers' section must be a list")
    watchers = _parse_watchers(watchers_section)

    return AgentConfig(processor=processor, watchers=watchers)

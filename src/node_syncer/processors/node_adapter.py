"""Adapter between the node update processor and the registry contract."""

from __future__ import annotations

from typing import Optional

from node_translator.config import ProcessorConfig
from node_translator.model import KVPair
from node_translator.processor import NodeUpdateProcessor, ProcessResult
from node_translator.tracker import NodeCIDRTracker

from .base import UpdateProcessor


class NodeProcessorAdapter(UpdateProcessor):
    """Wrap :class:`~node_translator.processor.NodeUpdateProcessor` for registry use."""

    def __init__(self, processor: NodeUpdateProcessor) -> None:
        self._processor = processor

    @property
    def processor(self) -> NodeUpdateProcessor:
        return self._processor

    def process(self, kvp: KVPair) -> ProcessResult:
        return self._processor.process(kvp)

    def on_syncer_starting(self) -> None:
        self._processor.on_syncer_starting()


def build_node_processor(
    config: Optional[ProcessorConfig] = None,
    *,
    tracker: Optional[NodeCIDRTracker] = None,
) -> NodeProcessorAdapter:
    """Helper mirroring the builder pattern used for other processors."""

    return NodeProcessorAdapter(NodeUpdateProcessor(config, tracker=tracker))

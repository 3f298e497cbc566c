"""Tiny processor registry used to drive update processors end-to-end."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

from node_translator.model import KVPair, ResourceKey

from .processors import UpdateProcessor

LOG = logging.getLogger(__name__)

RecordSink = Callable[[List[KVPair]], None]


class ProcessorRegistry:
    """Dispatch resource change events to the processor registered for their kind.

    The records a processor returns are handed to every sink, including when
    the processor reports field errors: those records are still the best
    translation available for the event.
    """

    def __init__(self) -> None:
        self._processors: Dict[str, UpdateProcessor] = {}
        self._sinks: List[RecordSink] = []

    def register(self, kind: str, processor: UpdateProcessor) -> None:
        if kind in self._processors:
            raise ValueError(f"processor for kind '{kind}' already registered")
        self._processors[kind] = processor

    def unregister(self, kind: str) -> None:
        self._processors.pop(kind, None)

    def add_sink(self, sink: RecordSink) -> None:
        self._sinks.append(sink)

    def on_syncer_starting(self) -> None:
        for processor in self._processors.values():
            processor.on_syncer_starting()

    def handle(self, kvp: KVPair) -> List[KVPair]:
        if not isinstance(kvp.key, ResourceKey):
            raise TypeError(f"Unsupported key type: {type(kvp.key)!r}")

        processor = self._processors.get(kvp.key.kind)
        if processor is None:
            raise KeyError(f"no processor registered for kind '{kvp.key.kind}'")

        records, error = processor.process(kvp)
        if error is not None:
            LOG.warning(
                "Processor for %s '%s' returned partial results: %s",
                kvp.key.kind,
                kvp.key.name,
                error,
            )

        for sink in self._sinks:
            sink(records)
        return records

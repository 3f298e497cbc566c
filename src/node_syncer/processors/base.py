"""Abstract interface for update processors."""

from __future__ import annotations

from abc import ABC, abstractmethod

from node_translator.model import KVPair
from node_translator.processor import ProcessResult


class UpdateProcessor(ABC):
    """Base class for processors managed by :class:`ProcessorRegistry`."""

    @abstractmethod
    def process(self, kvp: KVPair) -> ProcessResult:
        """Translate ``kvp`` into the records published downstream."""

    @abstractmethod
    def on_syncer_starting(self) -> None:
        """Called whenever the pipeline (re)starts a full sync."""

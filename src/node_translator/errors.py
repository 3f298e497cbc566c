"""Exceptions raised or returned by the node translator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


class KeyMismatchError(TypeError):
    """The event key does not identify a node resource."""


class ValueTypeError(TypeError):
    """The event value is not a :class:`~node_translator.model.NodeDescriptor`."""


@dataclass(frozen=True)
class FieldFailure:
    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


class NodeUpdateError(Exception):
    """Aggregate of the field failures seen while translating one node.

    It is returned next to the (partial) record list rather than raised, so
    callers can apply everything that did translate.
    """

    def __init__(self, node: str, failures: Sequence[FieldFailure]) -> None:
        if not failures:
            raise ValueError("NodeUpdateError requires at least one failure")
        self.node = node
        self.failures = list(failures)
        super().__init__(
            f"failed to translate {len(self.failures)} field(s) of node '{node}': "
            + "; ".join(str(f) for f in self.failures)
        )

    @property
    def last(self) -> FieldFailure:
        return self.failures[-1]

"""Update processors exposed to the registry."""

from .base import UpdateProcessor  # noqa: F401
from .node_adapter import NodeProcessorAdapter, build_node_processor  # noqa: F401

__all__ = [
    "NodeProcessorAdapter",
    "UpdateProcessor",
    "build_node_processor",
]

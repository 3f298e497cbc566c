"""Minimal syncer integration for the node update processor.

A full deployment feeds the processor from a watch/notify pipeline backed by
the datastore.  This package implements the small subset of that pipeline the
processor needs, a registry keyed by resource kind that dispatches change
events and fans out the resulting records, so the translator can be exercised
end-to-end in tests and lab environments.
"""

from .processors import UpdateProcessor, build_node_processor  # noqa: F401
from .registry import ProcessorRegistry  # noqa: F401

__all__ = [
    "ProcessorRegistry",
    "UpdateProcessor",
    "build_node_processor",
]

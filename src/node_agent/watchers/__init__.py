"""Watcher implementations used by the node agent."""

from .file import FileNodeWatcher  # noqa: F401

__all__ = ["FileNodeWatcher"]

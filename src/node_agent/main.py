"""Entry point for the standalone node agent."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from pathlib import Path
from threading import Event
from typing import List

from node_syncer import ProcessorRegistry, build_node_processor
from node_translator.model import KIND_NODE, KVPair

from .config import load_config
from .watchers import FileNodeWatcher

LOG = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def log_records(records: List[KVPair]) -> None:
    for record in records:
        if record.is_delete:
            LOG.info("delete %s (revision %s)", record.key, record.revision)
        else:
            LOG.info("set %s = %s (revision %s)", record.key, record.value, record.revision)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the node agent")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("/etc/node-agent/agent.yaml"),
        help="Path to the agent configuration file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    config = load_config(args.config)

    registry = ProcessorRegistry()
    registry.register(KIND_NODE, build_node_processor(config.processor))
    registry.add_sink(log_records)
    registry.on_syncer_starting()

    stop_event = Event()

    watchers = []
    for watcher_cfg in config.watchers:
        if watcher_cfg.type == "file":
            watcher = FileNodeWatcher(
                registry=registry,
                path=watcher_cfg.path,
                interval=watcher_cfg.interval,
                stop_event=stop_event,
            )
        else:
            raise ValueError(f"unsupported watcher type '{watcher_cfg.type}'")
        # Perform an initial poll so we react immediately
        try:
            watcher.poll()
        except Exception:  # pragma: no cover - logged inside watcher
            LOG.exception("initial poll failed for watcher %s", watcher_cfg.path)
        watcher.start()
        watchers.append(watcher)

    if not watchers:
        LOG.warning("no watchers configured; agent will idle")

    def _shutdown(signum, frame):  # pragma: no cover - signal handler
        LOG.info("received signal %s, shutting down", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    try:
        while not stop_event.is_set():
            stop_event.wait(1.0)
    except KeyboardInterrupt:  # pragma: no cover - fallback if signal not set
        stop_event.set()

    for watcher in watchers:
        watcher.join()

    LOG.info("node agent stopped")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

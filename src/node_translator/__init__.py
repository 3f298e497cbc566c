"""Node to dataplane record translation.

This package turns a high-level node description into the independent
key/value records a dataplane agent consumes:

* the node's primary address, resolved from BGP settings or the node's own
  addresses;
* tunnel settings (IP-in-IP, VXLAN addresses and MACs);
* the encrypted mesh interface address and public key;
* address block (pod CIDR) assignments, reconciled against what the node held
  previously so removed blocks are deleted.

Parsing is per field: a malformed value turns into a delete for that field and
is reported, without blocking the others.  The package is pure Python with no
I/O so it can be driven by any watch/notify pipeline.
"""

from .config import ProcessorConfig  # noqa: F401
from .errors import KeyMismatchError, NodeUpdateError, ValueTypeError  # noqa: F401
from .processor import NodeUpdateProcessor, ProcessResult  # noqa: F401
from .tracker import NodeCIDRTracker  # noqa: F401

__all__ = [
    "KeyMismatchError",
    "NodeCIDRTracker",
    "NodeUpdateError",
    "NodeUpdateProcessor",
    "ProcessResult",
    "ProcessorConfig",
    "ValueTypeError",
]

"""Top-level package for py_bankclient.

Client runtime for the demo banking service: session lifecycle, HTTP contract
layer, fixed-point money codec and the async use cases built on them.
"""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = [
    "__version__",
]

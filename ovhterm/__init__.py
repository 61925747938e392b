"""Public package surface for ovhterm.

Exports ``main`` for programmatic CLI invocation.
The terminal runtime lives in ``ovhterm.runtime``; remote access in ``ovhterm.remote``.
"""

from __future__ import annotations

__version__ = "0.3.0"


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main", "__version__"]

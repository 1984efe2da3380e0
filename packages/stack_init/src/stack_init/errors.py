from __future__ import annotations


class StackInitError(Exception):
    """Base class for failures the `stack-init` CLI reports without a traceback."""

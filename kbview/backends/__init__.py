"""Backend implementations."""

from kbview.backends.local_api import LocalApiBackend

__all__ = ["LocalApiBackend"]

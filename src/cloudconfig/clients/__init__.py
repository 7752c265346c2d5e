"""Remote configuration server clients."""

from .http import HttpConfigServerClient

__all__ = ["HttpConfigServerClient"]

"""Testing utilities for cloudconfig."""

from .mocks import MockConfigServerClient

__all__ = [
    "MockConfigServerClient",
]

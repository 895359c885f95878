"""Ports - interfaces/protocols for external dependencies."""

from .entry_source import EntrySource

__all__ = [
    "EntrySource",
]

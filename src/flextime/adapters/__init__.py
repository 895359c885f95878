"""Adapters - I/O implementations of ports."""

from .harvest import HarvestExport
from .agileday import AgiledayExport

__all__ = [
    "HarvestExport",
    "AgiledayExport",
]

"""
Writer module.

Writes rendered files atomically after a structural sanity check.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .base import OutputPathError, OutputValidationError

__all__ = [
    "AtomicWriter",
    "OutputPathError",
    "OutputValidationError",
]

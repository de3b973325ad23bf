"""
Schema AST module.

Contains the Definition Model, the CSN parser and the CSN loader.
"""

from __future__ import annotations

from .compiler import CdsCompileError, CdsCompiler, load_csn
from .nodes import (
    Definition,
    Element,
    EnumValue,
    Kind,
    ParsedSchema,
    ScopeDefinitions,
)
from .parser import CsnParser

__all__ = [
    "Definition",
    "Element",
    "EnumValue",
    "Kind",
    "ParsedSchema",
    "ScopeDefinitions",
    "CsnParser",
    "CdsCompiler",
    "CdsCompileError",
    "load_csn",
]

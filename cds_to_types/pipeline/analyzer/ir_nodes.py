"""
IR (Intermediate Representation) node definitions.

These nodes represent the analyzed namespaces, ready for rendering. All
references are resolved and every property carries its final type text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

logger = logging.getLogger(__name__)

# Opaque placeholder emitted wherever a type cannot be determined
PLACEHOLDER_TYPE = "any"

UNION_SEPARATOR = " | "


@dataclass
class PropertySignature:
    """A property of an interface or class."""

    name: str = ""
    type: str = PLACEHOLDER_TYPE
    optional: bool = False

    # Type text with every reference spelled from the root; empty when it
    # reads the same from every namespace (builtins)
    qualified_type: str = ""

    def copy(self) -> PropertySignature:
        return PropertySignature(
            name=self.name, type=self.type, optional=self.optional, qualified_type=self.qualified_type
        )

    def qualified(self) -> PropertySignature:
        """Copy of the property typed in the namespace independent frame."""
        type_ = self.qualified_type or self.type
        return PropertySignature(name=self.name, type=type_, optional=self.optional, qualified_type=type_)


@dataclass
class InterfaceDeclaration:
    """A structural declaration; may extend several ancestors."""

    name: str = ""  # Emitted name (e.g. "IBooks")
    qualified_name: str = ""  # Fully qualified CDS name (e.g. "my.bookshop.Books")
    namespace: str = ""  # Owning namespace ("" for the root)

    # Ancestors as fully qualified CDS names, in declaration order
    extends: list[str] = field(default_factory=list)

    # Ancestors as rendered reference expressions (e.g. "_sap_common.ICodeList")
    heritage: list[str] = field(default_factory=list)

    properties: list[PropertySignature] = field(default_factory=list)
    comment: str | None = None


@dataclass
class ClassDeclaration:
    """A runtime-bearing declaration with flattened properties and no ancestors."""

    name: str = ""
    qualified_name: str = ""
    properties: list[PropertySignature] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)


@dataclass
class EnumMember:
    name: str = ""
    value: Any = None
    has_value: bool = False


@dataclass
class EnumDeclaration:
    name: str = ""
    members: list[EnumMember] = field(default_factory=list)
    comment: str | None = None


@dataclass
class TypeAliasDeclaration:
    name: str = ""
    type: str = PLACEHOLDER_TYPE
    comment: str | None = None


@dataclass
class NamespaceBlock:
    """A nested namespace, used for the bound actions of an entity."""

    name: str = ""
    declarations: list[Declaration] = field(default_factory=list)


Declaration = Union[TypeAliasDeclaration, EnumDeclaration, InterfaceDeclaration, NamespaceBlock]


@dataclass
class ImportDeclaration:
    """A namespace import (``import * as alias from "specifier"``)."""

    module_specifier: str = ""
    alias: str = ""
    namespace: str = ""


@dataclass
class OutputUnit:
    """Everything emitted for one namespace, service or the root scope."""

    namespace: str = ""
    directory: str = ""  # Relative output directory ("a/b/c", "" for the root)

    declarations: list[Declaration] = field(default_factory=list)
    imports: list[ImportDeclaration] = field(default_factory=list)

    # Runtime-bearing form (tree layout only)
    classes: list[ClassDeclaration] = field(default_factory=list)
    runtime_enums: list[EnumDeclaration] = field(default_factory=list)
    exports: list[str] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.namespace == ""

    def interfaces(self) -> list[InterfaceDeclaration]:
        """Top-level interfaces of the unit, in declaration order."""
        return [d for d in self.declarations if isinstance(d, InterfaceDeclaration)]

    def enums(self) -> list[EnumDeclaration]:
        return [d for d in self.declarations if isinstance(d, EnumDeclaration)]


class DiagnosticKind(str, Enum):
    """Kind of a non-fatal fallback taken during generation."""

    UNRESOLVED_REFERENCE = "unresolved_reference"
    TEXTUAL_TYPE_FALLBACK = "textual_type_fallback"
    PLACEHOLDER_TYPE = "placeholder_type"
    INHERITANCE_CYCLE = "inheritance_cycle"


@dataclass
class Diagnostic:
    kind: DiagnosticKind
    subject: str
    message: str


@dataclass
class Diagnostics:
    """Collects the fallbacks taken during one run."""

    items: list[Diagnostic] = field(default_factory=list)

    # Collect without logging, for repeated passes over already reported elements
    silent: bool = False

    def report(self, kind: DiagnosticKind, subject: str, message: str) -> None:
        self.items.append(Diagnostic(kind=kind, subject=subject, message=message))
        if self.silent:
            return
        if kind == DiagnosticKind.TEXTUAL_TYPE_FALLBACK:
            logger.debug("%s: %s", subject, message)
        else:
            logger.warning("%s: %s", subject, message)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.items if d.kind == kind]

    def warnings(self) -> list[Diagnostic]:
        """Diagnostics worth a warning; textual fallbacks still produce a real type."""
        return [d for d in self.items if d.kind != DiagnosticKind.TEXTUAL_TYPE_FALLBACK]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

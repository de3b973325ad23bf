"""
Reference resolver for cross-namespace references.

Turns dotted fully qualified CDS names into module qualifiers, relative
import paths and collision-free import aliases, and collects the namespaces
a namespace has to import.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ...utils import split_namespace
from ..schema_ast.nodes import Element, ParsedSchema
from .name_resolver import NameResolver

if TYPE_CHECKING:
    from .namespace import NamespaceModel

# The root scope has no name. Where a non-empty key is needed for it we use
# this sentinel, which can never be a CDS identifier.
ROOT_NAMESPACE_NAME = "$ROOT$"

# Shadow elements of localized entities; present in the model, never imported
LOCALIZATION_ELEMENTS = frozenset({"texts", "localized"})

BUILTIN_TYPE_PREFIX = "cds."


class ReferenceStyle(str, Enum):
    """How a cross-namespace reference is spelled in emitted code."""

    ALIAS = "alias"  # Through an import alias: _sap_common.Currencies
    NAMESPACE = "namespace"  # Through the dotted namespace path: sap.common.Currencies
    QUALIFIED = "qualified"  # Dotted path even for local types, the same in every namespace


@dataclass(frozen=True)
class ModuleQualifier:
    """Points to a namespace, or to a type within a namespace.

    Used to print different flavours of a namespace: as import path, as path
    pointing to the containing directory, as import alias.
    """

    namespace: str = ""
    type_name: str | None = None

    @property
    def directory(self) -> str:
        """The namespace with path separators instead of dots."""
        return self.namespace.replace(".", "/")

    @property
    def alias(self) -> str:
        return alias(self)

    def relative_path(self, from_namespace: str) -> str:
        return relative_path(from_namespace, self.namespace)

    def module_specifier(self, from_namespace: str) -> str:
        """Import specifier of this namespace as seen from another namespace."""
        rel = self.relative_path(from_namespace)
        if not rel.startswith(".."):
            rel = "./" + rel
        return rel


def qualify(path: str, contains_type_name: bool = False) -> ModuleQualifier:
    """
    Build a qualifier from a dotted path.

    Args:
        path: "foo.bar" or, with ``contains_type_name``, "foo.bar.A"
        contains_type_name: Whether the last segment names a type

    Returns:
        ModuleQualifier; the root namespace is the empty string
    """
    if contains_type_name:
        namespace, type_name = split_namespace(path)
        return ModuleQualifier(namespace=namespace, type_name=type_name)
    return ModuleQualifier(namespace=path)


def relative_path(from_namespace: str, to_namespace: str) -> str:
    """
    Relative directory path between two namespaces.

    ``relative_path("foo.bar.baz", "foo.bar.moo") == "../moo"``; the result
    is empty when both namespaces are the same, meaning no import is needed.
    """
    if from_namespace == to_namespace:
        return ""
    start = from_namespace.replace(".", "/") or "."
    target = to_namespace.replace(".", "/") or "."
    return posixpath.relpath(target, start)


def _escape_segment(segment: str) -> str:
    # CDS identifiers never start with a digit, so "_0" cannot be produced by
    # the segment separator followed by a real segment.
    return segment.replace("_", "_0")


def alias(qualifier: ModuleQualifier) -> str:
    """
    Import alias of a qualifier.

    ``foo.bar`` becomes ``_foo_bar``, ``foo.bar.A`` becomes ``_foo_bar.A``.
    The leading underscore keeps the root namespace from resolving to an
    empty name: it becomes ``_``.
    """
    segments = [_escape_segment(s) for s in qualifier.namespace.split(".") if s]
    name = "_" + "_".join(segments)
    if qualifier.type_name:
        name += "." + qualifier.type_name
    return name


@dataclass(frozen=True)
class TypeReference:
    """A resolved pointer from one namespace to a type."""

    source_namespace: str = ""
    target_namespace: str = ""
    type_name: str = ""
    relative_path: str = ""
    is_array: bool = False

    @property
    def is_local(self) -> bool:
        return self.source_namespace == self.target_namespace

    @property
    def qualifier(self) -> ModuleQualifier:
        return ModuleQualifier(namespace=self.target_namespace, type_name=self.type_name)

    def expression(self, style: ReferenceStyle) -> str:
        """The reference as it is written in the source namespace."""
        if self.is_local and style != ReferenceStyle.QUALIFIED:
            text = self.type_name
        elif style == ReferenceStyle.ALIAS:
            text = self.qualifier.alias
        elif self.target_namespace == "":
            # Root declarations sit at the top level of the single file
            text = self.type_name
        else:
            text = f"{self.target_namespace}.{self.type_name}"
        return text + "[]" if self.is_array else text


class ReferenceResolver:
    """Resolves references against the full, read-only Definition Model."""

    def __init__(self, schema: ParsedSchema, name_resolver: NameResolver):
        """
        Initialize the resolver.

        Args:
            schema: The full Definition Model
            name_resolver: Provides emitted names of definitions
        """
        self.schema = schema
        self.name_resolver = name_resolver

    def resolve(self, fq_name: str, source_namespace: str, is_array: bool = False) -> TypeReference | None:
        """
        Resolve a fully qualified name as seen from a namespace.

        Unqualified names are tried in the source namespace first.

        Returns:
            TypeReference, or None if the name is absent from the model
        """
        fq_name = self.lookup_name(fq_name, source_namespace)
        if fq_name is None:
            return None

        target_namespace = self.schema.namespace_of(fq_name) or ""
        return TypeReference(
            source_namespace=source_namespace,
            target_namespace=target_namespace,
            type_name=self.name_resolver.type_name(fq_name),
            relative_path=relative_path(source_namespace, target_namespace),
            is_array=is_array,
        )

    def lookup_name(self, name: str, source_namespace: str = "") -> str | None:
        """Find the fully qualified name a (possibly local) name refers to."""
        if source_namespace and "." not in name:
            local = f"{source_namespace}.{name}"
            if local in self.schema.definitions:
                return local
        if name in self.schema.definitions:
            return name
        return None

    def resolve_references(self, namespace: NamespaceModel) -> list[ModuleQualifier]:
        """
        Collect the external namespaces referenced by the entities of a namespace.

        Scans declared ancestors and the resolved type of every property.
        Properties named like localization shadow elements and targets absent
        from the model are skipped.

        Args:
            namespace: The namespace to collect the imports for

        Returns:
            Distinct external namespaces in discovery order, without self references
        """
        discovered: dict[str, ModuleQualifier] = {}

        def add(fq_name: str) -> None:
            target = self.lookup_name(fq_name, namespace.name)
            if target is None:
                return
            target_namespace = self.schema.namespace_of(target) or ""
            if target_namespace != namespace.name and target_namespace not in discovered:
                discovered[target_namespace] = qualify(target_namespace)

        for entity in namespace.entities:
            definition = entity.definition
            for ancestor in definition.includes:
                add(ancestor)
            for element_name, element in definition.elements.items():
                if element_name in LOCALIZATION_ELEMENTS:
                    continue
                for referenced in self.referenced_names(element):
                    add(referenced)

        return list(discovered.values())

    @staticmethod
    def referenced_names(element: Element) -> list[str]:
        """Fully qualified names an element's type points to."""
        names = []
        if element.target:
            names.append(element.target)
        if isinstance(element.type, str) and not element.type.startswith(BUILTIN_TYPE_PREFIX):
            names.append(element.type)
        if element.items is not None:
            names.extend(ReferenceResolver.referenced_names(element.items))
        for inner in (element.elements or {}).values():
            names.extend(ReferenceResolver.referenced_names(inner))
        return names

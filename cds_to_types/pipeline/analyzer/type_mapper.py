"""
Type mapper from CSN elements to TypeScript type text.

Type text is extracted in two stages: a structural lookup through the
Definition Model and, when that yields nothing, a textual lookup of the
element's literal type. If both fail the placeholder type is used.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..schema_ast.nodes import Element, ParsedSchema
from .ir_nodes import PLACEHOLDER_TYPE, UNION_SEPARATOR, DiagnosticKind, Diagnostics
from .reference_resolver import (
    BUILTIN_TYPE_PREFIX,
    ModuleQualifier,
    ReferenceResolver,
    ReferenceStyle,
    qualify,
)

BUILTIN_TYPES = {
    "cds.UUID": "string",
    "cds.String": "string",
    "cds.LargeString": "string",
    "cds.Time": "string",
    "cds.Binary": "Buffer",
    "cds.LargeBinary": "Buffer",
    "cds.Boolean": "boolean",
    "cds.Integer": "number",
    "cds.UInt8": "number",
    "cds.Int16": "number",
    "cds.Int32": "number",
    "cds.Int64": "number",
    "cds.Integer64": "number",
    "cds.Decimal": "number",
    "cds.DecimalFloat": "number",
    "cds.Double": "number",
    "cds.Date": "Date",
    "cds.DateTime": "Date",
    "cds.Timestamp": "Date",
}

# Separators of a textual type reference: "my.Books:title" or "my.Books=title"
_TEXTUAL_SEPARATOR = re.compile(r"[:=]")

# Bound on chains of type-of references
MAX_TYPE_OF_DEPTH = 16


class TypeSource(str, Enum):
    """Stage that produced an extracted type."""

    STRUCTURAL = "structural"
    TEXTUAL = "textual"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class ExtractedType:
    """Result of a type text extraction."""

    text: str
    source: TypeSource

    @property
    def is_placeholder(self) -> bool:
        return self.source == TypeSource.PLACEHOLDER


def array_of(text: str) -> str:
    """Array type of a type text, parenthesizing unions."""
    if UNION_SEPARATOR in text:
        return f"({text})[]"
    return text + "[]"


class TypeMapper:
    """Maps the elements of one namespace to TypeScript type text.

    Every cross-namespace reference written while mapping is recorded, so
    the caller can import the referenced namespaces.
    """

    def __init__(
        self,
        schema: ParsedSchema,
        resolver: ReferenceResolver,
        diagnostics: Diagnostics,
        namespace: str = "",
        style: ReferenceStyle = ReferenceStyle.ALIAS,
    ):
        """
        Initialize the mapper.

        Args:
            schema: The full Definition Model
            resolver: Resolves named references
            diagnostics: Collector for fallbacks
            namespace: Namespace the type text is written in
            style: How cross-namespace references are spelled
        """
        self.schema = schema
        self.resolver = resolver
        self.diagnostics = diagnostics
        self.namespace = namespace
        self.style = style

        # Target namespace -> qualifier, in discovery order
        self.references: dict[str, ModuleQualifier] = {}

    def extract(self, element: Element, subject: str) -> ExtractedType:
        """
        Extract the type text of an element.

        Args:
            element: The element to map
            subject: Name used in diagnostics (e.g. "my.bookshop.Books.author")

        Returns:
            ExtractedType with the stage that produced it
        """
        text = self._structural(element, subject)
        if text is not None:
            return ExtractedType(text, TypeSource.STRUCTURAL)

        text = self._textual(element, subject)
        if text is not None:
            self.diagnostics.report(
                DiagnosticKind.TEXTUAL_TYPE_FALLBACK,
                subject,
                f"Type resolved from its textual form {element.type!r}",
            )
            return ExtractedType(text, TypeSource.TEXTUAL)

        if element.target:
            self.diagnostics.report(
                DiagnosticKind.UNRESOLVED_REFERENCE,
                subject,
                f"Association target {element.target!r} is not part of the model",
            )
        else:
            self.diagnostics.report(
                DiagnosticKind.PLACEHOLDER_TYPE,
                subject,
                f"Cannot determine the type of {_describe(element)}, using {PLACEHOLDER_TYPE!r}",
            )
        return ExtractedType(PLACEHOLDER_TYPE, TypeSource.PLACEHOLDER)

    def qualified_text(self, element: Element, subject: str) -> str:
        """
        Type text of an element with every reference spelled from the root.

        The text reads the same whichever namespace it is compared in. The
        extraction is repeated without recording imports or reporting the
        fallbacks again.
        """
        mapper = TypeMapper(
            self.schema, self.resolver, Diagnostics(silent=True), self.namespace, ReferenceStyle.QUALIFIED
        )
        return mapper.extract(element, subject).text

    def qualify_local(self, name: str) -> str:
        """Root-spelled form of a name declared in this namespace."""
        return f"{self.namespace}.{name}" if self.namespace else name

    def reference(self, name: str, is_array: bool = False) -> str | None:
        """Reference expression of a named definition, or None if it is unknown."""
        ref = self.resolver.resolve(name, self.namespace, is_array)
        if ref is None:
            return None
        if not ref.is_local and ref.target_namespace not in self.references:
            self.references[ref.target_namespace] = qualify(ref.target_namespace)
        return ref.expression(self.style)

    def imported_namespaces(self) -> list[ModuleQualifier]:
        return list(self.references.values())

    def _structural(self, element: Element, subject: str, depth: int = 0) -> str | None:
        if depth > MAX_TYPE_OF_DEPTH:
            return None

        if element.items is not None:
            inner = self._structural(element.items, subject, depth + 1)
            return None if inner is None else array_of(inner)

        if element.target:
            return self.reference(element.target, is_array=element.is_to_many)

        if element.elements is not None:
            return self._inline_structure(element.elements, subject)

        type_ = element.type
        if isinstance(type_, dict):
            return self._type_of(type_.get("ref") or [], subject, depth + 1)
        if isinstance(type_, str):
            if type_ in BUILTIN_TYPES:
                return BUILTIN_TYPES[type_]
            if type_.startswith(BUILTIN_TYPE_PREFIX):
                return None
            return self.reference(type_)
        return None

    def _textual(self, element: Element, subject: str) -> str | None:
        if not isinstance(element.type, str):
            return None
        parts = _TEXTUAL_SEPARATOR.split(element.type, maxsplit=1)
        if len(parts) != 2:
            return None
        definition_name, path = parts[0].strip(), parts[1].strip()
        if not definition_name or not path:
            return None
        return self._type_of([definition_name, *path.split(".")], subject)

    def _type_of(self, ref: list, subject: str, depth: int = 0) -> str | None:
        """Type of the element a ``{"ref": [definition, element, ...]}`` points to."""
        if not ref or not all(isinstance(segment, str) for segment in ref):
            return None

        fq_name = self.resolver.lookup_name(ref[0], self.namespace)
        definition = self.schema.get(fq_name) if fq_name else None
        if definition is None:
            return None

        path = ref[1:]
        if not path:
            return self.reference(fq_name)

        element = definition.elements.get(path[0])
        for segment in path[1:]:
            if element is None or element.elements is None:
                return None
            element = element.elements.get(segment)
        if element is None:
            return None
        return self._structural(element, subject, depth + 1)

    def _inline_structure(self, elements: dict[str, Element], owner: str) -> str:
        members = []
        for name, inner in elements.items():
            extracted = self.extract(inner, f"{owner}.{name}")
            optional = "?" if inner.is_nullable else ""
            members.append(f"{name}{optional}: {extracted.text}")
        if not members:
            return "{}"
        return "{ " + "; ".join(members) + " }"


def _describe(element: Element) -> str:
    if element.type is not None:
        return f"type {element.type!r}"
    return "an untyped element"

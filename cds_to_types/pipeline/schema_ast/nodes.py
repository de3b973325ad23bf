"""
Definition model for compiled CDS (CSN) schemas.

These nodes represent the parsed definitions of a CSN document before any
reference resolution or TypeScript-specific processing. They are frozen:
once the parser built them, nothing in the pipeline changes them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Kind(str, Enum):
    """Kind tag of a CSN definition."""

    ENTITY = "entity"
    ASPECT = "aspect"
    EVENT = "event"
    TYPE = "type"
    ACTION = "action"
    FUNCTION = "function"
    SERVICE = "service"
    CONTEXT = "context"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> Kind:
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


# Kinds that only group other definitions and are never emitted
SCOPE_KINDS = frozenset({Kind.SERVICE, Kind.CONTEXT})


@dataclass(frozen=True)
class EnumValue:
    """One member of a CDS enum."""

    name: str = ""
    value: Any = None
    has_value: bool = False


@dataclass(frozen=True)
class Element:
    """A property (element) of an entity, structured type or action parameter."""

    name: str = ""

    # "cds.String", "my.Type" or a {"ref": [...]} type-of reference
    type: str | dict[str, Any] | None = None

    # Association / composition target (fully qualified)
    target: str | None = None
    cardinality_max: str | int | None = None

    # Foreign keys of a managed association: list of key element paths
    keys: tuple[tuple[str, ...], ...] = ()

    # Arrayed element ("many") and inline structure
    items: Element | None = None
    elements: dict[str, Element] | None = None

    # Inline enum
    enum: dict[str, EnumValue] | None = None

    key: bool = False
    not_null: bool = False

    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def is_nullable(self) -> bool:
        return not self.key and not self.not_null

    @property
    def is_to_many(self) -> bool:
        """Whether the association points to a collection."""
        if self.cardinality_max is None:
            return False
        if self.cardinality_max == "*":
            return True
        try:
            return int(self.cardinality_max) > 1
        except (TypeError, ValueError):
            return False


@dataclass(frozen=True)
class Definition:
    """One compiled schema entry (a CSN definition)."""

    name: str = ""  # Fully qualified name
    kind: Kind = Kind.UNKNOWN

    elements: dict[str, Element] = field(default_factory=dict)
    includes: tuple[str, ...] = ()
    annotations: dict[str, Any] = field(default_factory=dict)
    doc: str | None = None  # Doc comment of the source definition

    # For types: base type, arrayed type, enum and association target
    type: str | dict[str, Any] | None = None
    items: Element | None = None
    enum: dict[str, EnumValue] | None = None
    target: str | None = None
    cardinality_max: str | int | None = None

    # For actions and functions
    params: dict[str, Element] = field(default_factory=dict)
    returns: Element | None = None

    # Bound actions of an entity
    actions: dict[str, Definition] = field(default_factory=dict)

    def annotation(self, key: str, default: Any = None) -> Any:
        """Look up an annotation, with or without the leading ``@``."""
        if not key.startswith("@"):
            key = "@" + key
        return self.annotations.get(key, default)

    def as_element(self) -> Element:
        """View a type definition as an element, for type mapping."""
        return Element(
            name=self.name,
            type=self.type,
            target=self.target,
            cardinality_max=self.cardinality_max,
            items=self.items,
            elements=self.elements or None,
            enum=self.enum,
            not_null=True,
        )


@dataclass
class ScopeDefinitions:
    """Definitions that belong to one namespace or service."""

    name: str = ""
    definitions: dict[str, Definition | None] = field(default_factory=dict)


@dataclass
class ParsedSchema:
    """The read-only Definition Model of one run.

    Attributes:
        definitions: Every definition of the CSN, keyed by fully qualified name
        namespaces: Named namespaces, in order of first appearance
        services: Services, in declaration order
        root: Definitions outside of any namespace or service
        owners: Fully qualified name -> owning scope name ("" for the root)
    """

    definitions: dict[str, Definition] = field(default_factory=dict)
    namespaces: list[ScopeDefinitions] = field(default_factory=list)
    services: list[ScopeDefinitions] = field(default_factory=list)
    root: dict[str, Definition | None] = field(default_factory=dict)
    owners: dict[str, str] = field(default_factory=dict)

    def get(self, fq_name: str) -> Definition | None:
        return self.definitions.get(fq_name)

    def namespace_of(self, fq_name: str) -> str | None:
        """Return the scope that owns a definition, or None if it is unknown."""
        return self.owners.get(fq_name)

"""
Namespace model.

A namespace groups the definitions of one CDS namespace, one service or the
unnamed root scope, classified into entities, enums, type aliases and
actions/functions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..schema_ast.nodes import SCOPE_KINDS, Definition, EnumValue, Kind
from .name_resolver import NameResolver, is_entity_like
from .reference_resolver import ROOT_NAMESPACE_NAME

logger = logging.getLogger(__name__)

ENTITY_ENUM_NAME = "Entity"
SANITIZED_ENTITY_ENUM_NAME = "SanitizedEntity"


@dataclass
class ModelType:
    """Base class of the classified definitions of a namespace."""

    fq_name: str = ""
    name: str = ""  # Name relative to the namespace
    namespace: str = ""
    definition: Definition = field(default_factory=Definition)


@dataclass
class Entity(ModelType):
    sanitized_name: str = ""


@dataclass
class EnumType(ModelType):
    # Members of derived enums, which have no definition of their own
    members: dict[str, EnumValue] = field(default_factory=dict)

    def enum_members(self) -> dict[str, EnumValue]:
        return self.members or self.definition.enum or {}


@dataclass
class TypeAlias(ModelType):
    pass


@dataclass
class ActionFunction(ModelType):
    @property
    def kind(self) -> Kind:
        return self.definition.kind


class NamespaceModel:
    """Classified definitions of one namespace, service or the root scope."""

    def __init__(
        self,
        definitions: dict[str, Definition | None],
        name_resolver: NameResolver,
        name: str = "",
    ):
        """
        Initialize the namespace.

        Args:
            definitions: Fully qualified name -> Definition, in declaration order
            name_resolver: Provides local and sanitized names
            name: Namespace or service name, "" for the root scope
        """
        self.name = name
        self.definitions = definitions
        self.name_resolver = name_resolver

        self.entities: list[Entity] = []
        self.enums: list[EnumType] = []
        self.type_aliases: list[TypeAlias] = []
        self.action_functions: list[ActionFunction] = []

        self._extract_types()

    @property
    def is_root(self) -> bool:
        return self.name == ""

    @property
    def key(self) -> str:
        """Non-empty key of the namespace; the root scope uses a sentinel."""
        return self.name or ROOT_NAMESPACE_NAME

    @property
    def directory(self) -> str:
        return self.name.replace(".", "/")

    def get_types(self) -> list[ModelType]:
        """Type aliases, enums and entities of this namespace."""
        return [*self.type_aliases, *self.enums, *self.entities]

    def _extract_types(self) -> None:
        """Classify every definition by its kind."""
        for fq_name, definition in self.definitions.items():
            if definition is None or definition.kind in SCOPE_KINDS:
                continue

            local_name = self.name_resolver.local_name(fq_name)
            common = dict(fq_name=fq_name, name=local_name, namespace=self.name, definition=definition)

            if is_entity_like(definition):
                self.entities.append(Entity(sanitized_name=self.name_resolver.sanitized_name(fq_name), **common))
            elif definition.kind == Kind.TYPE and definition.enum:
                self.enums.append(EnumType(**common))
            elif definition.kind == Kind.TYPE:
                self.type_aliases.append(TypeAlias(**common))
            elif definition.kind in (Kind.ACTION, Kind.FUNCTION):
                self.action_functions.append(ActionFunction(**common))
            else:
                logger.debug("Skipping %s of unsupported kind %s", fq_name, definition.kind.value)

    def generate_entities_enum(self, sanitized: bool = False) -> EnumType:
        """
        Generate the enumeration of all entities of this namespace.

        Args:
            sanitized: Whether member values are the sanitized entity names
                instead of the fully qualified ones

        Returns:
            The derived enum
        """
        members = {}
        for entity in self.entities:
            value = entity.sanitized_name if sanitized else entity.fq_name
            members[entity.sanitized_name] = EnumValue(name=entity.sanitized_name, value=value, has_value=True)

        name = SANITIZED_ENTITY_ENUM_NAME if sanitized else ENTITY_ENUM_NAME
        return EnumType(fq_name=name, name=name, namespace=self.name, members=members)

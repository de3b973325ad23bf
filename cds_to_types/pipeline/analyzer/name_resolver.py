"""
Name resolver for emitted identifiers.

Computes singular/plural display names of entities and the TypeScript names
under which definitions are declared and referenced.
"""

from __future__ import annotations

import re

from ...utils import sanitize_identifier, to_pascal_case
from ..schema_ast.nodes import Definition, Kind, ParsedSchema

# Words that are the same in singular and plural
UNCOUNTABLE_WORDS = ("species", "news", "series", "data", "information", "equipment")

# Endings of words that already are singular
SINGULAR_ENDINGS = ("ss", "us", "is")

_SINGULAR_RULES = [
    (re.compile(r"ees$", re.IGNORECASE), "ee"),
    (re.compile(r"(ss|x|z|ch|sh)es$", re.IGNORECASE), r"\1"),
    (re.compile(r"([^aeiou])ies$", re.IGNORECASE), r"\1y"),
    (re.compile(r"s$", re.IGNORECASE), ""),
]

_PLURAL_RULES = [
    (re.compile(r"([^aeiou])y$", re.IGNORECASE), r"\1ies"),
    (re.compile(r"(s|x|z|ch|sh)$", re.IGNORECASE), r"\1es"),
]

SINGULAR_ANNOTATION = "@singular"
PLURAL_ANNOTATION = "@plural"

# Kinds declared as interfaces
ENTITY_KINDS = frozenset({Kind.ENTITY, Kind.ASPECT, Kind.EVENT})


def _is_uncountable(word: str) -> bool:
    return word.lower().endswith(UNCOUNTABLE_WORDS)


def singularize(word: str) -> str:
    """Best-effort English singular of a word.

    This is a heuristic, not a linguistic guarantee.
    """
    if not word or _is_uncountable(word) or word.lower().endswith(SINGULAR_ENDINGS):
        return word
    for pattern, replacement in _SINGULAR_RULES:
        if pattern.search(word):
            return pattern.sub(replacement, word)
    return word


def pluralize(word: str) -> str:
    """Best-effort English plural of a (singular) word."""
    if not word or _is_uncountable(word):
        return word
    for pattern, replacement in _PLURAL_RULES:
        if pattern.search(word):
            return pattern.sub(replacement, word)
    return word + "s"


def is_entity_like(definition: Definition) -> bool:
    """Whether a definition is emitted as an interface."""
    if definition.kind in ENTITY_KINDS:
        return True
    return definition.kind == Kind.TYPE and bool(definition.elements)


class NameResolver:
    """Resolves local and emitted names of definitions."""

    def __init__(self, schema: ParsedSchema, interface_prefix: str = "", use_singular_names: bool = False):
        """
        Initialize the resolver.

        Args:
            schema: The full Definition Model
            interface_prefix: Prefix for entity interfaces
            use_singular_names: Name entity interfaces after their singular form
        """
        self.schema = schema
        self.interface_prefix = interface_prefix
        self.use_singular_names = use_singular_names

    def local_name(self, fq_name: str) -> str:
        """Name of a definition relative to its owning namespace."""
        namespace = self.schema.namespace_of(fq_name)
        if namespace and fq_name.startswith(namespace + "."):
            return fq_name[len(namespace) + 1 :]
        return fq_name

    def names(self, entity_name: str, namespace: str) -> tuple[str, str]:
        """
        Compute the singular and plural display names of an entity.

        ``@singular`` and ``@plural`` annotations on the fully qualified
        entity are used verbatim; anything missing is derived heuristically.

        Args:
            entity_name: Entity name relative to its namespace
            namespace: Owning namespace ("" for the root)

        Returns:
            (singular, plural)
        """
        fq_name = f"{namespace}.{entity_name}" if namespace else entity_name
        definition = self.schema.get(fq_name)

        singular = definition.annotation(SINGULAR_ANNOTATION) if definition else None
        plural = definition.annotation(PLURAL_ANNOTATION) if definition else None

        if not singular:
            singular = singularize(entity_name)
        if not plural:
            plural = pluralize(singular)
        return singular, plural

    def sanitized_name(self, fq_name: str) -> str:
        """Identifier-safe local name of a definition."""
        return sanitize_identifier(self.local_name(fq_name))

    def type_name(self, fq_name: str) -> str:
        """Name under which a definition is declared in its namespace."""
        definition = self.schema.get(fq_name)
        if definition is not None and is_entity_like(definition):
            return self.entity_type_name(fq_name)
        return self.sanitized_name(fq_name)

    def entity_type_name(self, fq_name: str) -> str:
        local = self.local_name(fq_name)
        if self.use_singular_names:
            namespace = self.schema.namespace_of(fq_name) or ""
            local, _ = self.names(local, namespace)
        return f"{self.interface_prefix}{sanitize_identifier(local)}"

    def element_enum_name(self, fq_entity_name: str, element_name: str) -> str:
        """Name of the enum generated for an inline element enum."""
        return f"{self.sanitized_name(fq_entity_name)}{to_pascal_case(element_name)}"

    def action_names(self, action_name: str, kind: Kind) -> tuple[str, str, str]:
        """Names of the declarations generated for an action or function.

        Returns:
            (enum name, params interface name, return type alias name)
        """
        prefix = "Func" if kind == Kind.FUNCTION else "Action"
        base = f"{prefix}{to_pascal_case(sanitize_identifier(action_name))}"
        return base, f"{self.interface_prefix}{base}Params", f"{base}Return"

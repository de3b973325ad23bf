"""
CSN parser that builds the Definition Model.

Phase 1 of the pipeline: turn the compiled CSN JSON into frozen Definitions
and group them into namespaces, services and the root scope, without
resolving references or doing any TypeScript-specific processing.
"""

from __future__ import annotations

import logging
from typing import Any

from .nodes import (
    SCOPE_KINDS,
    Definition,
    Element,
    EnumValue,
    Kind,
    ParsedSchema,
    ScopeDefinitions,
)

logger = logging.getLogger(__name__)


class CsnParser:
    """Parses a compiled CSN document into a ParsedSchema."""

    def parse(self, csn: dict[str, Any]) -> ParsedSchema:
        """
        Parse a CSN document.

        Args:
            csn: The compiled CSN dictionary (``{"definitions": {...}}``)

        Returns:
            ParsedSchema with every definition assigned to exactly one scope
        """
        raw_definitions = csn.get("definitions") or {}

        definitions: dict[str, Definition] = {}
        for name, raw in raw_definitions.items():
            if not isinstance(raw, dict):
                logger.debug("Skipping malformed definition %s", name)
                continue
            definitions[name] = self._parse_definition(name, raw)

        schema = ParsedSchema(definitions=definitions)
        self._group_definitions(schema)
        return schema

    def _group_definitions(self, schema: ParsedSchema) -> None:
        """Assign each definition to its service, namespace or the root scope."""
        services = [name for name, d in schema.definitions.items() if d.kind == Kind.SERVICE]
        scope_names = {name for name, d in schema.definitions.items() if d.kind in SCOPE_KINDS}

        service_scopes: dict[str, ScopeDefinitions] = {name: ScopeDefinitions(name=name) for name in services}
        namespace_scopes: dict[str, ScopeDefinitions] = {}

        for name, definition in schema.definitions.items():
            if definition.kind in SCOPE_KINDS:
                continue

            service = self._owning_service(name, services)
            if service is not None:
                service_scopes[service].definitions[name] = definition
                schema.owners[name] = service
                continue

            namespace = self._owning_namespace(name, schema.definitions, scope_names)
            schema.owners[name] = namespace
            if namespace == "":
                schema.root[name] = definition
            else:
                namespace_scopes.setdefault(namespace, ScopeDefinitions(name=namespace)).definitions[name] = definition

        schema.namespaces = list(namespace_scopes.values())
        schema.services = list(service_scopes.values())

    @staticmethod
    def _owning_service(name: str, services: list[str]) -> str | None:
        """Return the longest service whose name prefixes the definition."""
        candidates = [s for s in services if name.startswith(s + ".")]
        if not candidates:
            return None
        return max(candidates, key=len)

    @staticmethod
    def _owning_namespace(name: str, definitions: dict[str, Definition], scope_names: set[str]) -> str:
        """Return the longest dotted prefix that is not itself a definition.

        ``my.bookshop.Books.texts`` belongs to ``my.bookshop``, not to
        ``my.bookshop.Books``. Contexts do count as namespaces.
        """
        segments = name.split(".")
        for end in range(len(segments) - 1, 0, -1):
            prefix = ".".join(segments[:end])
            if prefix in definitions and prefix not in scope_names:
                continue
            return prefix
        return ""

    def _parse_definition(self, name: str, raw: dict[str, Any]) -> Definition:
        """Parse one CSN definition."""
        actions = {}
        for action_name, raw_action in (raw.get("actions") or {}).items():
            actions[action_name] = self._parse_definition(action_name, raw_action)

        return Definition(
            name=name,
            kind=Kind.parse(raw.get("kind")),
            elements=self._parse_elements(raw.get("elements")),
            includes=tuple(raw.get("includes") or ()),
            annotations=self._extract_annotations(raw),
            doc=raw.get("doc"),
            type=raw.get("type"),
            items=self._parse_element("", raw["items"]) if isinstance(raw.get("items"), dict) else None,
            enum=self._parse_enum(raw.get("enum")),
            target=raw.get("target"),
            cardinality_max=(raw.get("cardinality") or {}).get("max"),
            params=self._parse_elements(raw.get("params")),
            returns=self._parse_element("", raw["returns"]) if isinstance(raw.get("returns"), dict) else None,
            actions=actions,
        )

    def _parse_elements(self, raw_elements: dict[str, Any] | None) -> dict[str, Element]:
        elements = {}
        for element_name, raw in (raw_elements or {}).items():
            if isinstance(raw, dict):
                elements[element_name] = self._parse_element(element_name, raw)
        return elements

    def _parse_element(self, name: str, raw: dict[str, Any]) -> Element:
        """Parse one element (property, parameter or return type)."""
        inline = raw.get("elements")
        return Element(
            name=name,
            type=raw.get("type"),
            target=raw.get("target"),
            cardinality_max=(raw.get("cardinality") or {}).get("max"),
            keys=self._parse_keys(raw.get("keys")),
            items=self._parse_element("", raw["items"]) if isinstance(raw.get("items"), dict) else None,
            elements=self._parse_elements(inline) if isinstance(inline, dict) else None,
            enum=self._parse_enum(raw.get("enum")),
            key=bool(raw.get("key", False)),
            not_null=bool(raw.get("notNull", False)),
            annotations=self._extract_annotations(raw),
        )

    @staticmethod
    def _parse_keys(raw_keys: list[Any] | None) -> tuple[tuple[str, ...], ...]:
        """Parse foreign keys of a managed association (``[{"ref": ["ID"]}]``)."""
        keys = []
        for raw in raw_keys or ():
            if isinstance(raw, dict) and raw.get("ref"):
                keys.append(tuple(str(segment) for segment in raw["ref"]))
        return tuple(keys)

    @staticmethod
    def _parse_enum(raw_enum: dict[str, Any] | None) -> dict[str, EnumValue] | None:
        if not isinstance(raw_enum, dict):
            return None
        members = {}
        for member_name, raw in raw_enum.items():
            if isinstance(raw, dict) and "val" in raw:
                members[member_name] = EnumValue(name=member_name, value=raw["val"], has_value=True)
            else:
                members[member_name] = EnumValue(name=member_name)
        return members

    @staticmethod
    def _extract_annotations(raw: dict[str, Any]) -> dict[str, Any]:
        """Extract ``@`` annotations from a CSN node."""
        return {key: value for key, value in raw.items() if key.startswith("@")}

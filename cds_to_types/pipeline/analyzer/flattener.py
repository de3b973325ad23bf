"""
Inheritance flattening.

JavaScript classes have a single parent, CDS entities may include several
aspects. For the runtime stubs every interface is turned into a class that
carries the properties of all its ancestors and extends nothing. Property
types are compared and merged with every reference spelled from the root,
so equal local names in different namespaces are told apart.
"""

from __future__ import annotations

import logging

from .ir_nodes import (
    UNION_SEPARATOR,
    ClassDeclaration,
    DiagnosticKind,
    Diagnostics,
    InterfaceDeclaration,
    PropertySignature,
)

logger = logging.getLogger(__name__)


def merge_union(existing: str, added: str) -> str:
    """
    Widen a type to a union with another type.

    Branches are compared textually and kept in order of first appearance,
    so the existing type always comes first.

    Args:
        existing: Type text already on the property
        added: Type text of the same property on an ancestor

    Returns:
        Union type text without duplicate branches
    """
    branches: list[str] = []
    for text in (existing, added):
        for branch in text.split(UNION_SEPARATOR):
            branch = branch.strip()
            if branch and branch not in branches:
                branches.append(branch)
    return UNION_SEPARATOR.join(branches)


def add_or_amend_property(properties: list[PropertySignature], prop: PropertySignature) -> None:
    """Add a property, or widen the type of an existing property of the same name."""
    for existing in properties:
        if existing.name != prop.name:
            continue
        if existing.type != prop.type:
            existing.type = merge_union(existing.type, prop.type)
        return
    properties.append(prop.copy())


class InheritanceFlattener:
    """Flattens interfaces of the whole model into ancestor-free classes."""

    def __init__(self, interfaces: dict[str, InterfaceDeclaration], diagnostics: Diagnostics | None = None):
        """
        Initialize the flattener.

        Args:
            interfaces: Every interface of the model, keyed by qualified name
            diagnostics: Collector for skipped ancestors and cycles
        """
        self.interfaces = interfaces
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

        self._flattened: dict[str, list[PropertySignature]] = {}
        self._in_progress: set[str] = set()

    def flatten(self, interface: InterfaceDeclaration) -> ClassDeclaration:
        """
        Flatten one interface.

        Args:
            interface: The interface to flatten

        Returns:
            Class with the merged properties of the interface and all its ancestors
        """
        properties = self._flatten_properties(interface)
        return ClassDeclaration(
            name=interface.name,
            qualified_name=interface.qualified_name,
            properties=[p.copy() for p in properties],
        )

    def flatten_all(self, interfaces: list[InterfaceDeclaration]) -> list[ClassDeclaration]:
        return [self.flatten(interface) for interface in interfaces]

    def _flatten_properties(self, interface: InterfaceDeclaration) -> list[PropertySignature]:
        key = interface.qualified_name or interface.name
        if key in self._flattened:
            return self._flattened[key]

        self._in_progress.add(key)
        # Compared and merged in the root-spelled frame
        properties = [p.qualified() for p in interface.properties]

        for ancestor_name in interface.extends:
            ancestor = self._lookup(ancestor_name, interface.namespace)
            if ancestor is None:
                self.diagnostics.report(
                    DiagnosticKind.UNRESOLVED_REFERENCE,
                    key,
                    f"Ancestor {ancestor_name!r} is not part of the model, skipping it",
                )
                continue

            ancestor_key = ancestor.qualified_name or ancestor.name
            if ancestor_key in self._in_progress:
                self.diagnostics.report(
                    DiagnosticKind.INHERITANCE_CYCLE,
                    key,
                    f"Inheritance cycle through {ancestor_key!r}, skipping it",
                )
                continue

            for prop in self._flatten_properties(ancestor):
                add_or_amend_property(properties, prop)

        self._in_progress.discard(key)
        self._flattened[key] = properties
        logger.debug("Flattened %s with %d properties", key, len(properties))
        return properties

    def _lookup(self, name: str, namespace: str) -> InterfaceDeclaration | None:
        if namespace and "." not in name:
            local = self.interfaces.get(f"{namespace}.{name}")
            if local is not None:
                return local
        return self.interfaces.get(name)

"""
Namespace analyzer that transforms the Definition Model to IR.

Phase 2 of the pipeline: classify definitions per namespace, resolve
references, map element types and build one OutputUnit per namespace,
ready for rendering.
"""

from __future__ import annotations

import logging

from ...utils import property_key, sanitize_identifier, to_pascal_case
from ..config import GeneratorConfig
from ..schema_ast.nodes import Definition, Element, EnumValue, ParsedSchema
from .ir_nodes import (
    PLACEHOLDER_TYPE,
    Declaration,
    DiagnosticKind,
    Diagnostics,
    EnumDeclaration,
    EnumMember,
    ImportDeclaration,
    InterfaceDeclaration,
    NamespaceBlock,
    OutputUnit,
    PropertySignature,
    TypeAliasDeclaration,
)
from .name_resolver import NameResolver
from .namespace import Entity, EnumType, NamespaceModel
from .reference_resolver import LOCALIZATION_ELEMENTS, ReferenceResolver, ReferenceStyle
from .type_mapper import TypeMapper

logger = logging.getLogger(__name__)

BOUND_ACTIONS_BLOCK = "actions"


class NamespaceAnalyzer:
    """Analyzes the namespaces of a schema and builds their output units."""

    def __init__(self, schema: ParsedSchema, config: GeneratorConfig, diagnostics: Diagnostics | None = None):
        """
        Initialize the analyzer.

        Args:
            schema: The full Definition Model
            config: Code generation configuration
            diagnostics: Collector for fallbacks taken during analysis
        """
        self.schema = schema
        self.config = config
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

        self.name_resolver = NameResolver(schema, config.interface_prefix, config.use_singular_names)
        self.resolver = ReferenceResolver(schema, self.name_resolver)

        # Separate files import each other through aliases, a single file
        # spells out the namespace path.
        self.style = ReferenceStyle.ALIAS if config.is_tree else ReferenceStyle.NAMESPACE

    def namespaces(self) -> list[NamespaceModel]:
        """Namespaces, then services, then the root scope."""
        models = [
            NamespaceModel(scope.definitions, self.name_resolver, scope.name)
            for scope in [*self.schema.namespaces, *self.schema.services]
        ]
        models.append(NamespaceModel(self.schema.root, self.name_resolver))
        return models

    def analyze(self, namespace: NamespaceModel) -> OutputUnit:
        """
        Build the output unit of one namespace.

        Args:
            namespace: The namespace to analyze

        Returns:
            OutputUnit with its structural declarations and imports
        """
        mapper = TypeMapper(self.schema, self.resolver, self.diagnostics, namespace.name, self.style)
        unit = OutputUnit(namespace=namespace.name, directory=namespace.directory)

        for alias in namespace.type_aliases:
            extracted = mapper.extract(alias.definition.as_element(), alias.fq_name)
            unit.declarations.append(
                TypeAliasDeclaration(
                    name=self.name_resolver.sanitized_name(alias.fq_name),
                    type=extracted.text,
                    comment=alias.definition.doc,
                )
            )

        for enum in namespace.enums:
            unit.declarations.append(
                self._enum_declaration(
                    self.name_resolver.sanitized_name(enum.fq_name), enum.enum_members(), enum.definition.doc
                )
            )

        for entity in namespace.entities:
            unit.declarations.extend(self._entity_declarations(entity, mapper))

        for action in namespace.action_functions:
            unit.declarations.extend(self._action_declarations(action.definition, action.name, action.fq_name, mapper))

        if namespace.entities:
            unit.declarations.append(self._derived_enum(namespace.generate_entities_enum()))
            unit.declarations.append(self._derived_enum(namespace.generate_entities_enum(sanitized=True)))

        if self.config.is_tree:
            unit.imports = self._imports(namespace, mapper)

        logger.debug(
            "Analyzed namespace %r: %d declarations, %d imports",
            namespace.name,
            len(unit.declarations),
            len(unit.imports),
        )
        return unit

    def _entity_declarations(self, entity: Entity, mapper: TypeMapper) -> list[Declaration]:
        """Inline element enums, the interface and the bound actions of an entity."""
        definition = entity.definition
        declarations: list[Declaration] = []
        properties: list[PropertySignature] = []

        for element_name, element in definition.elements.items():
            subject = f"{entity.fq_name}.{element_name}"
            if element.enum:
                enum_name = self.name_resolver.element_enum_name(entity.fq_name, element_name)
                declarations.append(self._enum_declaration(enum_name, element.enum))
                type_text, qualified_type = enum_name, mapper.qualify_local(enum_name)
            elif self._is_foreign_shadow(element_name, element, entity.namespace):
                logger.debug("Not importing the target of %s", subject)
                type_text = qualified_type = PLACEHOLDER_TYPE
            else:
                type_text = mapper.extract(element, subject).text
                qualified_type = mapper.qualified_text(element, subject)
            properties.append(
                PropertySignature(
                    name=property_key(element_name),
                    type=type_text,
                    optional=element.is_nullable,
                    qualified_type=qualified_type,
                )
            )

        if self.config.emit_foreign_keys:
            properties.extend(self._foreign_keys(definition, mapper, {p.name for p in properties}))

        extends, heritage = self._heritage(entity, mapper)
        interface_name = self.name_resolver.entity_type_name(entity.fq_name)
        declarations.append(
            InterfaceDeclaration(
                name=interface_name,
                qualified_name=entity.fq_name,
                namespace=entity.namespace,
                extends=extends,
                heritage=heritage,
                properties=properties,
                comment=definition.doc,
            )
        )

        if definition.actions:
            block = NamespaceBlock(name=f"{interface_name}.{BOUND_ACTIONS_BLOCK}")
            for action_name, action in definition.actions.items():
                block.declarations.extend(
                    self._action_declarations(action, action_name, f"{entity.fq_name}.{action_name}", mapper)
                )
            declarations.append(block)

        return declarations

    def _heritage(self, entity: Entity, mapper: TypeMapper) -> tuple[list[str], list[str]]:
        """Resolved ancestors of an entity, as qualified names and as reference expressions."""
        extends: list[str] = []
        heritage: list[str] = []
        for ancestor in entity.definition.includes:
            fq_name = self.resolver.lookup_name(ancestor, entity.namespace)
            expression = mapper.reference(ancestor) if fq_name else None
            if expression is None:
                self.diagnostics.report(
                    DiagnosticKind.UNRESOLVED_REFERENCE,
                    entity.fq_name,
                    f"Ancestor {ancestor!r} is not part of the model, skipping it",
                )
                continue
            if fq_name not in extends:
                extends.append(fq_name)
                heritage.append(expression)
        return extends, heritage

    def _is_foreign_shadow(self, element_name: str, element: Element, namespace: str) -> bool:
        """Whether a localization shadow element points into another namespace; those are never imported."""
        if element_name not in LOCALIZATION_ELEMENTS or not element.target:
            return False
        target = self.resolver.lookup_name(element.target, namespace)
        return target is not None and (self.schema.namespace_of(target) or "") != namespace

    def _foreign_keys(self, definition: Definition, mapper: TypeMapper, present: set[str]) -> list[PropertySignature]:
        """``<association>_<key>`` properties of the managed to-one associations of a definition."""
        foreign_keys = []
        for element_name, element in definition.elements.items():
            if not element.target or element.is_to_many or not element.keys:
                continue
            for key_path in element.keys:
                name = "_".join((element_name, *key_path))
                if name in present:
                    continue
                present.add(name)

                key = self._foreign_key_element(element, key_path)
                if key is None:
                    type_text = qualified_type = PLACEHOLDER_TYPE
                else:
                    subject = f"{element.target}.{'.'.join(key_path)}"
                    type_text = mapper.extract(key, subject).text
                    qualified_type = mapper.qualified_text(key, subject)
                foreign_keys.append(
                    PropertySignature(
                        name=property_key(name),
                        type=type_text,
                        optional=True,
                        qualified_type=qualified_type,
                    )
                )
        return foreign_keys

    def _foreign_key_element(self, association: Element, key_path: tuple[str, ...]) -> Element | None:
        target = self.schema.get(association.target)
        key: Element | None = None
        if target is not None:
            key = target.elements.get(key_path[0])
            for segment in key_path[1:]:
                key = (key.elements or {}).get(segment) if key is not None else None
        if key is None or key.target:
            return None
        return key

    def _action_declarations(
        self, definition: Definition, name: str, fq_name: str, mapper: TypeMapper
    ) -> list[Declaration]:
        """Name enum, parameter interface and return type alias of an action or function."""
        enum_name, params_name, return_name = self.name_resolver.action_names(name, definition.kind)

        members = [EnumMember(name="name", value=name, has_value=True)]
        for param_name in definition.params:
            members.append(
                EnumMember(name=f"param{to_pascal_case(sanitize_identifier(param_name))}", value=param_name, has_value=True)
            )
        declarations: list[Declaration] = [EnumDeclaration(name=enum_name, members=members, comment=definition.doc)]

        if definition.params:
            properties = []
            for param_name, param in definition.params.items():
                extracted = mapper.extract(param, f"{fq_name}.{param_name}")
                properties.append(
                    PropertySignature(name=property_key(param_name), type=extracted.text, optional=param.is_nullable)
                )
            namespace = mapper.namespace
            declarations.append(
                InterfaceDeclaration(
                    name=params_name,
                    qualified_name=f"{namespace}.{params_name}" if namespace else params_name,
                    namespace=namespace,
                    properties=properties,
                )
            )

        if definition.returns is not None:
            extracted = mapper.extract(definition.returns, f"{fq_name}.returns")
            declarations.append(TypeAliasDeclaration(name=return_name, type=extracted.text))

        return declarations

    def _enum_declaration(
        self, name: str, values: dict[str, EnumValue], comment: str | None = None
    ) -> EnumDeclaration:
        # Members without a value stand for their own name
        members = [
            EnumMember(
                name=sanitize_identifier(member_name),
                value=value.value if value.has_value else member_name,
                has_value=True,
            )
            for member_name, value in values.items()
        ]
        return EnumDeclaration(name=name, members=members, comment=comment)

    def _derived_enum(self, enum: EnumType) -> EnumDeclaration:
        return self._enum_declaration(enum.name, enum.enum_members())

    def _imports(self, namespace: NamespaceModel, mapper: TypeMapper) -> list[ImportDeclaration]:
        """Namespaces referenced by entities first, then by type aliases and actions."""
        qualifiers = self.resolver.resolve_references(namespace)
        seen = {q.namespace for q in qualifiers}
        for qualifier in mapper.imported_namespaces():
            if qualifier.namespace not in seen and qualifier.namespace != namespace.name:
                seen.add(qualifier.namespace)
                qualifiers.append(qualifier)

        return [
            ImportDeclaration(
                module_specifier=q.module_specifier(namespace.name),
                alias=q.alias,
                namespace=q.namespace,
            )
            for q in qualifiers
        ]

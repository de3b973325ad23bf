"""
Analyzer module.

Contains namespace classification, reference and name resolution, type
mapping, inheritance flattening and IR building.
"""

from __future__ import annotations

from .analyzer import NamespaceAnalyzer
from .flattener import InheritanceFlattener, add_or_amend_property, merge_union
from .ir_nodes import (
    ClassDeclaration,
    Diagnostic,
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
from .name_resolver import NameResolver, pluralize, singularize
from .namespace import ActionFunction, Entity, EnumType, NamespaceModel, TypeAlias
from .reference_resolver import (
    ROOT_NAMESPACE_NAME,
    ModuleQualifier,
    ReferenceResolver,
    ReferenceStyle,
    TypeReference,
    alias,
    qualify,
    relative_path,
)
from .type_mapper import ExtractedType, TypeMapper, TypeSource

__all__ = [
    "NamespaceAnalyzer",
    "InheritanceFlattener",
    "add_or_amend_property",
    "merge_union",
    "ClassDeclaration",
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
    "EnumDeclaration",
    "EnumMember",
    "ImportDeclaration",
    "InterfaceDeclaration",
    "NamespaceBlock",
    "OutputUnit",
    "PropertySignature",
    "TypeAliasDeclaration",
    "NameResolver",
    "pluralize",
    "singularize",
    "ActionFunction",
    "Entity",
    "EnumType",
    "NamespaceModel",
    "TypeAlias",
    "ROOT_NAMESPACE_NAME",
    "ModuleQualifier",
    "ReferenceResolver",
    "ReferenceStyle",
    "TypeReference",
    "alias",
    "qualify",
    "relative_path",
    "ExtractedType",
    "TypeMapper",
    "TypeSource",
]

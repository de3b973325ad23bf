"""
TypeScript code generation backend.

Generates the structural declarations of analyzed namespaces, either as one
declaration file per namespace or as a single file with one namespace block
per namespace.
"""

from __future__ import annotations

from ..analyzer.ir_nodes import (
    Declaration,
    EnumDeclaration,
    InterfaceDeclaration,
    NamespaceBlock,
    OutputUnit,
    TypeAliasDeclaration,
)
from ..config import GeneratorConfig
from .base import CodeBackend


class TypeScriptBackend(CodeBackend):
    """TypeScript code generation backend."""

    TEMPLATE_LANG = "typescript"
    FILE_EXTENSION = "ts"

    def __init__(self, config: GeneratorConfig):
        super().__init__(config)
        self.interface_template = self.get_template("interface")
        self.enum_template = self.get_template("enum")
        self.type_alias_template = self.get_template("type_alias")
        self.namespace_template = self.get_template("namespace")

    def generate(self, unit: OutputUnit, generation_comment: str = "") -> str:
        """Generate the declaration file (index.d.ts) of one namespace."""
        prefix = self.prefix_template.render(generation_comment=generation_comment, imports=unit.imports)
        return self.assemble(prefix, [self.render_declaration(d) for d in unit.declarations])

    def generate_file(self, units: list[OutputUnit], generation_comment: str = "") -> str:
        """
        Generate a single file holding every namespace.

        Named namespaces become ``export namespace`` blocks, the declarations
        of the root scope are written at the top level.

        Args:
            units: Analyzed namespaces, in emission order
            generation_comment: Comment line put at the top of the file

        Returns:
            Generated code as a string
        """
        blocks = []
        for unit in units:
            if unit.is_root:
                blocks.extend(self.render_declaration(d) for d in unit.declarations)
            elif unit.declarations:
                blocks.append(self.render_declaration(NamespaceBlock(name=unit.namespace, declarations=unit.declarations)))

        prefix = self.prefix_template.render(generation_comment=generation_comment, imports=[])
        return self.assemble(prefix, blocks)

    def render_declaration(self, declaration: Declaration) -> str:
        match declaration:
            case InterfaceDeclaration():
                return self.interface_template.render(
                    name=declaration.name,
                    heritage=declaration.heritage,
                    properties=declaration.properties,
                    comment=declaration.comment,
                )
            case EnumDeclaration():
                return self.enum_template.render(
                    name=declaration.name,
                    members=declaration.members,
                    comment=declaration.comment,
                )
            case TypeAliasDeclaration():
                return self.type_alias_template.render(
                    name=declaration.name,
                    type=declaration.type,
                    comment=declaration.comment,
                )
            case NamespaceBlock():
                body = "\n\n".join(self.render_declaration(d) for d in declaration.declarations)
                return self.namespace_template.render(name=declaration.name, body=body)
            case _:
                raise TypeError(f"Unsupported declaration: {type(declaration).__name__}")

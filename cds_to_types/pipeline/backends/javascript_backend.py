"""
JavaScript code generation backend.

Generates the runtime stubs (index.js) of analyzed namespaces: flattened
classes without types, frozen enum objects and the export manifest.
"""

from __future__ import annotations

from ..analyzer.ir_nodes import OutputUnit
from ..config import GeneratorConfig
from .base import CodeBackend


class JavaScriptBackend(CodeBackend):
    """JavaScript code generation backend."""

    TEMPLATE_LANG = "javascript"
    FILE_EXTENSION = "js"

    def __init__(self, config: GeneratorConfig):
        super().__init__(config)
        self.class_template = self.get_template("class")
        self.enum_template = self.get_template("enum")
        self.exports_template = self.get_template("exports")

    def generate(self, unit: OutputUnit, generation_comment: str = "") -> str:
        """Generate the runtime stub file of one namespace."""
        module_format = self.config.module_format.value

        blocks = [self.enum_template.render(name=e.name, members=e.members) for e in unit.runtime_enums]
        blocks.extend(self.class_template.render(name=c.name, properties=c.properties) for c in unit.classes)
        if unit.exports:
            blocks.append(self.exports_template.render(module_format=module_format, exports=unit.exports))

        prefix = self.prefix_template.render(generation_comment=generation_comment, module_format=module_format)
        return self.assemble(prefix, blocks)

"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ..analyzer.ir_nodes import OutputUnit
from ..config import GeneratorConfig


def format_literal(value: Any) -> str:
    """Format an enum value as a TypeScript/JavaScript literal.

    Numbers are written as is, anything else as a string literal.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return repr(value)
    if not isinstance(value, str):
        value = json.dumps(value)
    return json.dumps(value, ensure_ascii=False)


def format_doc_comment(text: str) -> str:
    """Format a doc string as a JSDoc comment."""
    lines = [line.rstrip() for line in text.strip().replace("*/", "*\\/").splitlines()]
    if len(lines) == 1:
        return f"/** {lines[0]} */"
    body = "\n".join(f" * {line}" if line else " *" for line in lines)
    return f"/**\n{body}\n */"


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: GeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.jinja_env.filters["literal"] = format_literal
        self.jinja_env.filters["doc_comment"] = format_doc_comment

        self.prefix_template = self.get_template("prefix")

    def get_template(self, name: str) -> jinja2.Template:
        return self.jinja_env.get_template(f"{name}.{self.FILE_EXTENSION}.jinja2")

    @abstractmethod
    def generate(self, unit: OutputUnit, generation_comment: str = "") -> str:
        """
        Generate code for one output unit.

        Args:
            unit: The analyzed namespace
            generation_comment: Comment line put at the top of the file

        Returns:
            Generated code as a string
        """

    @staticmethod
    def assemble(prefix: str, blocks: list[str]) -> str:
        """Join a file prefix and rendered blocks, separated by blank lines."""
        parts = [part for part in (prefix.strip("\n"), *blocks) if part]
        return "\n\n".join(parts) + "\n"

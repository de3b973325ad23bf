"""
Configuration for the generator pipeline.

Covers TypeScript emission, the output layout, post-processing formatters
and output file handling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output already exists.
    """

    FORCE = "force"  # Default: remove the previous output and regenerate it
    ERROR_IF_EXISTS = "error"  # Refuse to touch an existing output


class Layout(str, Enum):
    """Shape of the generated output."""

    FILE = "file"  # One .ts file, one `export namespace` block per namespace
    TREE = "tree"  # One directory per namespace with index.d.ts and index.js


class ModuleFormat(str, Enum):
    """Module syntax of the generated JavaScript stubs."""

    COMMONJS = "commonjs"
    ESM = "esm"


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle an existing output
        validate_before_write: Whether to sanity check files before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.FORCE
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for post-processing formatters."""

    # Whether formatting is enabled
    enabled: bool = False

    # Line length for the formatter
    print_width: int = 100

    # Indentation width
    tab_width: int = 4

    # Prettier executable (may be "npx prettier")
    executable: str = "prettier"


@dataclass
class GeneratorConfig:
    """Configuration options for code generation."""

    # Prefix for entity interfaces (e.g. "I" turns Books into IBooks)
    interface_prefix: str = ""

    # Output shape
    layout: Layout = Layout.FILE

    # Module syntax of JavaScript stubs (tree layout only)
    module_format: ModuleFormat = ModuleFormat.COMMONJS

    # Name entity interfaces after the singular form (Books -> Book)
    use_singular_names: bool = False

    # Emit `<association>_<key>` foreign key properties for managed associations
    emit_foreign_keys: bool = True

    # Write the compiled CSN next to the output for debugging
    dump_csn: bool = False

    # Add generation comment at top of each file
    add_generation_comment: bool = True

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def is_tree(self) -> bool:
        return self.layout == Layout.TREE

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary."""
        config = GeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.FORCE)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif k == "layout":
                config.layout = Layout(v)
            elif k == "module_format":
                config.module_format = ModuleFormat(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "interface_prefix": self.interface_prefix,
            "layout": self.layout.value,
            "module_format": self.module_format.value,
            "use_singular_names": self.use_singular_names,
            "emit_foreign_keys": self.emit_foreign_keys,
            "dump_csn": self.dump_csn,
            "add_generation_comment": self.add_generation_comment,
            "formatter": {
                "enabled": self.formatter.enabled,
                "print_width": self.formatter.print_width,
                "tab_width": self.formatter.tab_width,
                "executable": self.formatter.executable,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }

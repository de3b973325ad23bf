"""CDS to TypeScript Generator

A Python package for generating TypeScript declarations from compiled CDS
(CSN) models. Supports a single namespaced declaration file or a tree of
per-namespace declaration files with JavaScript runtime stubs.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    CdsCompileError,
    FormatterConfig,
    GenerationResult,
    GeneratorConfig,
    Layout,
    OutputConfig,
    OutputMode,
    OutputPathError,
    PipelineGenerator,
)

__all__ = [
    "PipelineGenerator",
    "GenerationResult",
    "GeneratorConfig",
    "FormatterConfig",
    "Layout",
    "OutputConfig",
    "OutputMode",
    "CdsCompileError",
    "OutputPathError",
    "AtomicWriter",
]

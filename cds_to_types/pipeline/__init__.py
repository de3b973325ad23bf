"""
Pipeline - CSN to TypeScript generator.

This module provides a multi-phase architecture for generating TypeScript
declarations from compiled CDS models:

1. Phase 1 (Parser): Parse the CSN into the Definition Model
2. Phase 2 (Analyzer): Classify namespaces, resolve references and build IR
3. Phase 3 (Flattener): Flatten inheritance for the runtime stubs (tree layout)
4. Phase 4 (Backend): Render declarations through Jinja2 templates
5. Phase 5 (Formatter): Optional post-processing with prettier
6. Phase 6 (Writer): Atomic writes of the rendered files
"""

from __future__ import annotations

from .config import FormatterConfig, GeneratorConfig, Layout, ModuleFormat, OutputConfig, OutputMode
from .generator import GenerationResult, PipelineGenerator
from .schema_ast import CdsCompileError, load_csn
from .writer import AtomicWriter, OutputPathError, OutputValidationError

__all__ = [
    "PipelineGenerator",
    "GenerationResult",
    "GeneratorConfig",
    "FormatterConfig",
    "Layout",
    "ModuleFormat",
    "OutputConfig",
    "OutputMode",
    "CdsCompileError",
    "load_csn",
    "AtomicWriter",
    "OutputPathError",
    "OutputValidationError",
]

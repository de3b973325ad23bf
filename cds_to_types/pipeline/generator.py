"""
Pipeline generator.

Runs the whole transformation: parse the CSN, analyze every namespace,
flatten inheritance for the runtime stubs, render, format and write.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .analyzer import Diagnostics, InheritanceFlattener, NamespaceAnalyzer, OutputUnit
from .backends import JavaScriptBackend, TypeScriptBackend
from .config import GeneratorConfig, OutputMode
from .formatters import PrettierFormatter
from .schema_ast import CsnParser
from .writer import AtomicWriter, OutputPathError

logger = logging.getLogger(__name__)

DECLARATION_FILE = "index.d.ts"
RUNTIME_FILE = "index.js"
GENERATED_FILES = (DECLARATION_FILE, RUNTIME_FILE)

DEFAULT_FILE_NAME = "index.ts"


@dataclass
class GenerationResult:
    """Outcome of one generation run.

    Attributes:
        files: Written (or rendered) files, keyed by path
        units: Analyzed namespaces, in emission order
        diagnostics: Fallbacks taken during the run
    """

    files: dict[str, str] = field(default_factory=dict)
    units: list[OutputUnit] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


class PipelineGenerator:
    """Generates TypeScript declarations from a compiled CSN document."""

    def __init__(
        self,
        csn: dict[str, Any],
        config: GeneratorConfig | None = None,
        generation_comment: str | None = None,
    ):
        """
        Initialize the generator.

        Args:
            csn: The compiled CSN dictionary
            config: Code generation configuration
            generation_comment: Comment put at the top of every file; derived
                from the command line when None
        """
        self.csn = csn
        self.config = config or GeneratorConfig()
        self.generation_comment = generation_comment
        self.diagnostics = Diagnostics()

        self.formatter = PrettierFormatter(self.config.formatter.executable) if self.config.formatter.enabled else None

        self._units: list[OutputUnit] | None = None

    def analyze(self) -> list[OutputUnit]:
        """
        Build the output units of every namespace.

        Returns:
            Units for namespaces, then services, then the root scope; units
            without declarations are left out
        """
        if self._units is not None:
            return self._units

        schema = CsnParser().parse(self.csn)
        analyzer = NamespaceAnalyzer(schema, self.config, self.diagnostics)

        units = []
        for namespace in analyzer.namespaces():
            unit = analyzer.analyze(namespace)
            if unit.declarations:
                units.append(unit)
            else:
                logger.debug("Nothing to emit for namespace %r", namespace.name)

        if self.config.is_tree:
            self._add_runtime_form(units)

        self._units = units
        return units

    def _add_runtime_form(self, units: list[OutputUnit]) -> None:
        """Flatten the interfaces of every unit into classes and fill the export manifest."""
        interfaces = {i.qualified_name: i for unit in units for i in unit.interfaces()}
        flattener = InheritanceFlattener(interfaces, self.diagnostics)

        for unit in units:
            unit.classes = flattener.flatten_all(unit.interfaces())
            unit.runtime_enums = unit.enums()
            unit.exports = [e.name for e in unit.runtime_enums] + [c.name for c in unit.classes]

    def render(self, file_name: str = DEFAULT_FILE_NAME) -> dict[str, str]:
        """
        Render every output file.

        Args:
            file_name: Name of the single output file (file layout only)

        Returns:
            Relative path -> file content
        """
        units = self.analyze()
        comment = self._generation_comment()
        typescript = TypeScriptBackend(self.config)

        files: dict[str, str] = {}
        if self.config.is_tree:
            javascript = JavaScriptBackend(self.config)
            for unit in units:
                directory = f"{unit.directory}/" if unit.directory else ""
                files[directory + DECLARATION_FILE] = typescript.generate(unit, comment)
                files[directory + RUNTIME_FILE] = javascript.generate(unit, comment)
        else:
            files[file_name] = typescript.generate_file(units, comment)

        if self.formatter is not None:
            files = self.formatter.format_files(files, self.config.formatter)
        return files

    def generate(self) -> GenerationResult:
        """Render every output file in memory, without writing anything."""
        files = self.render()
        return GenerationResult(files=files, units=self.analyze(), diagnostics=self.diagnostics)

    def write(self, output: str | Path) -> GenerationResult:
        """
        Render and write the output.

        With the file layout ``output`` is the file to write (".ts" is added
        when it has no suffix); with the tree layout it is the directory the
        namespace folders are created in.

        Args:
            output: Output file or directory

        Returns:
            GenerationResult with the written files

        Raises:
            OutputPathError: If the output path cannot be used
            OutputValidationError: If a rendered file fails validation
        """
        output = self.resolve_output(output)
        if self.config.dump_csn:
            self._check_overwrite(self.csn_dump_path(output))

        if self.config.is_tree:
            self._prepare_directory(output)
            files = self.render()
            targets = {output / path: code for path, code in files.items()}
        else:
            self._prepare_file(output)
            files = self.render(output.name)
            targets = {output.parent / path: code for path, code in files.items()}

        writer = AtomicWriter()
        validate = self.config.output.validate_before_write
        for path, code in targets.items():
            try:
                if self.config.output.atomic_write:
                    writer.write(path, code, validate=validate)
                else:
                    if validate:
                        writer.validate(code)
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_text(code, encoding="utf-8")
            except OSError as e:
                raise OutputPathError(f"Cannot write {path}: {e}") from e
            logger.info("Wrote %s", path)

        if self.config.dump_csn:
            csn_path = self.csn_dump_path(output)
            try:
                with open(csn_path, "w", encoding="utf-8") as f:
                    json.dump(self.csn, f, indent=2)
            except OSError as e:
                raise OutputPathError(f"Cannot write {csn_path}: {e}") from e
            logger.info("Wrote compiled CSN to %s", csn_path)

        return GenerationResult(
            files={str(path): code for path, code in targets.items()},
            units=self.analyze(),
            diagnostics=self.diagnostics,
        )

    def resolve_output(self, output: str | Path) -> Path:
        """Output path as it is written: ".ts" is added to a file output without suffix."""
        output = Path(output)
        if not self.config.is_tree and not output.suffix and not output.is_dir():
            output = output.with_suffix(".ts")
        return output

    def csn_dump_path(self, output: str | Path) -> Path:
        """Where the compiled CSN is written with ``dump_csn``: ``<output>.json``."""
        output = self.resolve_output(output)
        return output.with_name(output.name + ".json")

    def _check_overwrite(self, path: Path) -> None:
        if path.exists() and self.config.output.mode == OutputMode.ERROR_IF_EXISTS:
            raise OutputPathError(f"Output file already exists: {path}. Use force mode to overwrite.")

    def _prepare_file(self, output: Path) -> None:
        if output.is_dir():
            raise OutputPathError(f"Output {output} is a directory, expected a file")
        if not output.parent.is_dir():
            raise OutputPathError(f"Output directory {output.parent} does not exist")
        self._check_overwrite(output)

    def _prepare_directory(self, output: Path) -> None:
        """Check the output directory and remove the files of a previous run."""
        if output.exists() and not output.is_dir():
            raise OutputPathError(f"Output {output} is not a directory")
        if not output.exists():
            try:
                output.mkdir(parents=True)
            except OSError as e:
                raise OutputPathError(f"Cannot create output directory {output}: {e}") from e
            return

        previous = [p for name in GENERATED_FILES for p in output.rglob(name)]
        if previous and self.config.output.mode == OutputMode.ERROR_IF_EXISTS:
            raise OutputPathError(f"Output directory already contains generated files: {output}. Use force mode to overwrite.")

        directories = set()
        try:
            for path in previous:
                path.unlink()
                directories.update(p for p in path.parents if p != output and output in p.parents)
            # Deepest first, so emptied parents are removed as well
            for directory in sorted(directories, key=lambda p: len(p.parts), reverse=True):
                if not any(directory.iterdir()):
                    directory.rmdir()
        except OSError as e:
            raise OutputPathError(f"Cannot remove the previous output in {output}: {e}") from e

    def _generation_comment(self) -> str:
        """Generate a command line comment for the generated files."""
        if not self.config.add_generation_comment:
            return ""
        if self.generation_comment is not None:
            return self.generation_comment

        from .. import __version__
        from ..cli_utils import reconstruct_command_line

        try:
            from ..cds_to_types import cds_to_types as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            command_line = "cds_to_types"

        return f"// Generated by cds_to_types v{__version__} : {command_line}"

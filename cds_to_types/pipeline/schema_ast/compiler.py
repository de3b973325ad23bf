"""
Loading of compiled CSN documents.

The CDS compiler itself is an external tool: ``.cds`` sources are compiled
once per run through the ``cds`` command line, ``.json`` files are read as
already compiled CSN.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class CdsCompileError(Exception):
    """Raised when a CDS model cannot be compiled or loaded."""

    pass


class CdsCompiler:
    """Runs the external ``cds`` compiler to obtain a CSN document."""

    def __init__(self, executable: str = "cds", timeout: int = 120):
        self.executable = executable
        self.timeout = timeout

    def is_available(self) -> bool:
        """Check if the cds command line is installed."""
        return shutil.which(self.executable) is not None

    def compile(self, path: Path) -> dict[str, Any]:
        """
        Compile a CDS model to CSN.

        Args:
            path: CDS source file or project folder

        Returns:
            The compiled CSN dictionary

        Raises:
            CdsCompileError: If the compiler is missing or fails
        """
        if not self.is_available():
            raise CdsCompileError(f"'{self.executable}' was not found on PATH. Install @sap/cds-dk or pass a compiled CSN .json file instead.")

        cmd = [self.executable, "compile", str(path), "--to", "json"]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.SubprocessError as e:
            raise CdsCompileError(f"Failed to run '{self.executable}': {e}") from e

        if result.returncode != 0:
            raise CdsCompileError(f"Compiling {path} failed:\n{result.stderr.strip()}")

        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise CdsCompileError(f"Compiler output for {path} is not valid JSON: {e}") from e


def load_csn(path: Path, compiler: CdsCompiler | None = None) -> dict[str, Any]:
    """
    Load a CSN document from a compiled ``.json`` file or a CDS source.

    Args:
        path: Path to a ``.json`` CSN file, a ``.cds`` file or a CDS project folder
        compiler: Compiler to use for CDS sources

    Returns:
        The CSN dictionary
    """
    path = Path(path)
    if path.suffix == ".json":
        try:
            with open(path, encoding="utf-8") as f:
                csn = json.load(f)
        except json.JSONDecodeError as e:
            raise CdsCompileError(f"{path} is not valid CSN JSON: {e}") from e
        if not isinstance(csn, dict):
            raise CdsCompileError(f"{path} does not contain a CSN object")
        return csn

    return (compiler or CdsCompiler()).compile(path)

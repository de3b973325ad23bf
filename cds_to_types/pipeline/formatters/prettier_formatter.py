"""
Prettier formatter for TypeScript and JavaScript code.
"""

from __future__ import annotations

import logging
import shlex
import subprocess

from ..config import FormatterConfig
from .base import Formatter

logger = logging.getLogger(__name__)


class PrettierFormatter(Formatter):
    """Formatter using prettier for TypeScript and JavaScript code."""

    def __init__(self, executable: str = "prettier"):
        self.command = shlex.split(executable)
        self._available = None

    def is_available(self) -> bool:
        """Check if prettier is installed."""
        if self._available is None:
            try:
                result = subprocess.run(
                    [*self.command, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=30,
                )
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
            if not self._available:
                logger.warning("%s is not available, output is left unformatted", " ".join(self.command))
        return self._available

    def format(self, code: str, config: FormatterConfig, filename: str) -> str:
        """
        Format code using prettier.

        Args:
            code: Source code to format
            config: Formatter configuration
            filename: Output file name, prettier infers the parser from it

        Returns:
            Formatted code, or the original code if prettier fails
        """
        if not self.is_available():
            return code

        cmd = [
            *self.command,
            "--stdin-filepath",
            filename,
            "--print-width",
            str(config.print_width),
            "--tab-width",
            str(config.tab_width),
        ]

        try:
            result = subprocess.run(
                cmd,
                input=code,
                capture_output=True,
                text=True,
                timeout=60,
            )
        except subprocess.SubprocessError as e:
            logger.warning("Formatting %s failed: %s", filename, e)
            return code

        if result.returncode == 0:
            return result.stdout
        logger.warning("Formatting %s failed: %s", filename, result.stderr.strip())
        return code

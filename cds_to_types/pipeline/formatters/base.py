"""
Formatter seam run over the rendered declaration and runtime files.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..config import FormatterConfig

logger = logging.getLogger(__name__)


class Formatter(ABC):
    """Reformats rendered TypeScript/JavaScript files in memory."""

    # Rendered files a formatter is given; anything else is passed through
    suffixes: tuple[str, ...] = (".ts", ".js")

    @abstractmethod
    def format(self, code: str, config: FormatterConfig, filename: str) -> str:
        """Format one file; ``filename`` tells the tool which parser to use."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the external tool can be run."""

    def handles(self, filename: str) -> bool:
        return filename.endswith(self.suffixes)

    def format_files(self, files: dict[str, str], config: FormatterConfig) -> dict[str, str]:
        """
        Format every rendered file the formatter handles.

        Args:
            files: Relative output path -> rendered code, in output order
            config: Formatter configuration

        Returns:
            The same paths in the same order; files are left as rendered when
            the tool is missing
        """
        if not self.is_available():
            return dict(files)

        formatted = {}
        for path, code in files.items():
            formatted[path] = self.format(code, config, path) if self.handles(path) else code
        logger.debug("Formatted %d of %d files", sum(map(self.handles, files)), len(files))
        return formatted

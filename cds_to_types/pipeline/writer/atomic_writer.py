"""
Atomic file writer for safe code generation.

Ensures that file writes are atomic to prevent data corruption
from interrupted operations.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

from .base import OutputPathError, OutputValidationError

_BRACKETS = {"{": "}", "(": ")", "[": "]"}
_QUOTES = "\"'`"


def _unbalanced_bracket(content: str) -> str | None:
    """Return a description of the first unbalanced bracket, or None.

    String literals and comments are skipped.
    """
    stack: list[str] = []
    i = 0
    length = len(content)
    while i < length:
        char = content[i]
        if char in _QUOTES:
            i += 1
            while i < length and content[i] != char:
                i += 2 if content[i] == "\\" else 1
        elif content.startswith("//", i):
            newline = content.find("\n", i)
            i = length if newline == -1 else newline
        elif content.startswith("/*", i):
            end = content.find("*/", i + 2)
            if end == -1:
                return "unterminated comment"
            i = end + 1
        elif char in _BRACKETS:
            stack.append(_BRACKETS[char])
        elif char in _BRACKETS.values():
            if not stack or stack.pop() != char:
                line = content.count("\n", 0, i) + 1
                return f"unexpected {char!r} on line {line}"
        i += 1

    if stack:
        return f"{len(stack)} unclosed bracket(s)"
    return None


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file

    This ensures that an interrupted write operation never leaves
    the target file in an incomplete state.
    """

    def __init__(self, validate: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate: Optional validation function for TypeScript/JavaScript code
        """
        self._validate = validate or self._default_validate

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            OutputValidationError: If validation fails
            OutputPathError: If the directory of the file cannot be used
            OSError: If file operations fail
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            # Same directory ensures atomic rename on the same filesystem
            temp_fd, temp_path_str = tempfile.mkstemp(
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                text=True,
            )
        except OSError as e:
            raise OutputPathError(f"Cannot write to directory {path.parent}: {e}") from e

        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate(content)

            temp_path.replace(path)

        except Exception:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass  # Best effort cleanup
            raise

    def validate(self, content: str) -> None:
        """Run the configured validation on content without writing it."""
        self._validate(content)

    def _default_validate(self, content: str) -> None:
        """Default TypeScript/JavaScript validation.

        Args:
            content: Code to validate

        Raises:
            OutputValidationError: If validation fails
        """
        problem = _unbalanced_bracket(content)
        if problem is not None:
            raise OutputValidationError(f"Generated code has unbalanced brackets: {problem}")

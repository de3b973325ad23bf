"""
Errors raised while writing the generated output.
"""

from __future__ import annotations


class OutputPathError(Exception):
    """Raised when the output path cannot be used.

    This can happen when:
    - The output already exists and the output mode refuses to touch it
    - The parent directory of a single output file does not exist
    - The output path points to a file where a directory is needed
    - A directory on the output path cannot be created or written to
    """

    pass


class OutputValidationError(Exception):
    """Raised when a rendered file fails the sanity check before being written."""

    pass

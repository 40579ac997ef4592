"""
Backing file medium.

The JSON provider only ever reads or writes the whole file as text. Both
operations raise OSError on failure; the provider decides how to recover.
"""

from __future__ import annotations

from pathlib import Path


class FileMedium:
    """Whole-file UTF-8 text access to the backing file."""

    encoding = "utf-8"

    def read(self, path: Path) -> str:
        """Read the entire file as text.

        Invalid UTF-8 sequences are replaced with U+FFFD rather than failing.

        Raises:
            OSError: If the file is missing or unreadable.
        """
        return path.read_text(encoding=self.encoding, errors="replace")

    def write(self, path: Path, text: str) -> None:
        """Replace the entire file content with ``text``.

        Raises:
            OSError: If the file cannot be written.
        """
        path.write_text(text, encoding=self.encoding)

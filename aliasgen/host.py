"""
Filesystem host: markdown files with YAML frontmatter.

FileHost implements HostCapabilities for a single file chosen by the
caller (the CLI's PATH argument). The document title is the file name
without extension, as in note-taking vaults.
"""

import logging
from pathlib import Path
from typing import Any, Callable

import typer

from .frontmatter import parse_frontmatter, render_frontmatter, split_frontmatter
from .types import DocumentHandle

logger = logging.getLogger(__name__)

# Default max file size: 10MB
MAX_FILE_SIZE = 10_000_000


class FileHost:
    """
    Host capabilities backed by a markdown file on disk.

    Writing replaces only the ``aliases`` key: other frontmatter keys keep
    their values and order, and the body after the frontmatter block is
    preserved byte for byte.
    """

    def __init__(
        self,
        path: Path | str | None,
        *,
        notifier: Callable[[str], None] | None = None,
        max_size: int = MAX_FILE_SIZE,
    ):
        self.path = Path(path).expanduser().resolve() if path else None
        self.max_size = max_size
        self.messages: list[str] = []
        self._notifier = notifier or typer.echo

    def get_active_document(self) -> DocumentHandle | None:
        """The configured file, if it is an existing regular file."""
        if self.path is None or not self.path.is_file():
            return None
        return DocumentHandle(id=str(self.path), title=self.path.stem)

    def _read(self, handle: DocumentHandle) -> str:
        path = Path(handle.id)
        size = path.stat().st_size
        if size > self.max_size:
            raise IOError(f"File too large: {size} bytes (max {self.max_size}): {path}")
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise IOError(f"Not UTF-8 text: {path}") from e

    def read_body(self, handle: DocumentHandle) -> str:
        """Full file text, frontmatter included."""
        return self._read(handle)

    def read_frontmatter_aliases(self, handle: DocumentHandle) -> Any:
        """The ``aliases`` frontmatter value, or None if absent or unparseable.

        Raises:
            IOError: If the file cannot be read as UTF-8 text
        """
        text = self._read(handle)
        try:
            metadata, _ = parse_frontmatter(text)
        except ValueError as e:
            logger.warning("Ignoring frontmatter of %s: %s", handle.id, e)
            return None
        return metadata.get("aliases")

    def write_frontmatter_aliases(self, handle: DocumentHandle, aliases: list[str]) -> bool:
        """Rewrite the file with ``aliases`` set; False if the frontmatter is unusable."""
        path = Path(handle.id)
        text = self._read(handle)
        try:
            metadata, _ = parse_frontmatter(text)
        except ValueError as e:
            # Rewriting would destroy whatever the user had there
            logger.warning("Not rewriting %s: %s", path, e)
            return False
        _, body = split_frontmatter(text)

        metadata["aliases"] = list(aliases)
        path.write_text(render_frontmatter(metadata, body), encoding="utf-8")
        logger.info("Wrote %d aliases to %s", len(aliases), path)
        return True

    def notify_user(self, message: str) -> None:
        """Echo the message and remember it."""
        self.messages.append(message)
        self._notifier(message)

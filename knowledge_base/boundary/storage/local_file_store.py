"""
Local directory store for raw document artifacts.

One file per document, named after the document's filename. Blocking
filesystem calls run in a worker thread so the event loop is never held.

Dependencies: asyncio, pathlib
System role: File-artifact collaborator (write_file, unlink, mkdir)
"""

import asyncio
from pathlib import Path


class LocalFileStore:
    """Async facade over a single artifact directory."""

    def __init__(self, base_dir: str | Path) -> None:
        """
        Initialize file store.

        Args:
            base_dir: Directory holding the artifacts (created by mkdir())
        """
        self.base_dir = Path(base_dir)

    def path_for(self, filename: str) -> Path:
        """
        Resolve the artifact path for a filename.

        Only the final path component is used, so names such as
        "../../etc/passwd" cannot escape base_dir.

        Raises:
            ValueError: If the filename has no usable base name
        """
        name = Path(filename.replace("\\", "/")).name
        if name in ("", ".", ".."):
            raise ValueError(f"Invalid artifact filename: {filename!r}")
        return self.base_dir / name

    async def mkdir(self) -> None:
        """Create the artifact directory (and parents) if missing."""
        await asyncio.to_thread(self.base_dir.mkdir, parents=True, exist_ok=True)

    async def write_file(self, filename: str, data: bytes) -> Path:
        """
        Write an artifact, replacing any existing file of the same name.

        Args:
            filename: Document filename
            data: Raw bytes to persist

        Returns:
            Path: Where the artifact was written
        """
        path = self.path_for(filename)
        await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_bytes, data)
        return path

    async def unlink(self, filename: str) -> None:
        """
        Delete an artifact.

        Raises:
            FileNotFoundError: If the artifact does not exist
            OSError: If the artifact cannot be removed
        """
        await asyncio.to_thread(self.path_for(filename).unlink)

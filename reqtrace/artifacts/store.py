"""ArtifactStore — plain-file CRUD for artifacts inside a project folder."""

from __future__ import annotations

import logging
from pathlib import Path

from reqtrace.config import ARTIFACT_DIRS, ARTIFACT_EXTENSION

logger = logging.getLogger(__name__)


class ArtifactStore:
    """Read and write artifact files under a project root.

    Paths passed to the methods may be absolute or relative to the
    project root.  Filesystem errors propagate as :class:`OSError`.

    Parameters
    ----------
    project_root:
        Root directory of the project.
    """

    def __init__(self, project_root: str | Path) -> None:
        self.project_root = Path(project_root)

    def _resolve(self, path: str | Path) -> Path:
        path = Path(path)
        if path.is_absolute():
            return path
        return self.project_root / path

    def create_project_directory(self) -> Path:
        """Create the project root and its artifact folders.

        Returns the project root path.
        """
        self.project_root.mkdir(parents=True, exist_ok=True)
        for name in ARTIFACT_DIRS:
            (self.project_root / name).mkdir(exist_ok=True)

        logger.info("Created project structure at %s", self.project_root)
        return self.project_root

    def read(self, path: str | Path) -> str:
        """Return the text of an artifact file."""
        return self._resolve(path).read_text(encoding="utf-8")

    def write(self, path: str | Path, content: str) -> Path:
        """Write *content* to an artifact file, creating parent folders."""
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

        logger.debug("Wrote %s (%d chars)", target, len(content))
        return target

    def list_artifacts(self, artifact_type: str, extension: str = ARTIFACT_EXTENSION) -> list[str]:
        """Return the file names in an artifact folder with *extension*.

        A folder that does not exist yields an empty list.
        """
        folder = self.project_root / artifact_type
        if not folder.is_dir():
            return []
        return sorted(
            entry.name
            for entry in folder.iterdir()
            if entry.is_file() and entry.suffix == extension
        )

    def delete(self, path: str | Path) -> None:
        """Remove an artifact file from the working tree."""
        target = self._resolve(path)
        target.unlink()
        logger.info("Deleted %s", target)

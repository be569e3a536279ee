"""Artifact file operations addressed by path."""

from __future__ import annotations

from pathlib import Path

from reqtrace.artifacts.store import ArtifactStore


def _store_for(path: str | Path) -> tuple[ArtifactStore, str]:
    target = Path(path)
    return ArtifactStore(target.parent), target.name


def create_project_directory(path: str | Path) -> Path:
    """Create a project folder with its four artifact folders."""
    return ArtifactStore(path).create_project_directory()


def read_artifact_file(path: str | Path) -> str:
    store, name = _store_for(path)
    return store.read(name)


def write_artifact_file(path: str | Path, content: str) -> Path:
    """Write an artifact file, creating its parent folders."""
    store, name = _store_for(path)
    return store.write(name, content)


def list_artifacts(project_path: str | Path, artifact_type: str) -> list[str]:
    """Return the Markdown file names in one artifact folder."""
    return ArtifactStore(project_path).list_artifacts(artifact_type)


def delete_artifact_file(path: str | Path) -> None:
    store, name = _store_for(path)
    store.delete(name)

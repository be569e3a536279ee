"""Artifact storage — Markdown files grouped by artifact type."""

from reqtrace.artifacts.store import ArtifactStore

__all__ = ["ArtifactStore"]

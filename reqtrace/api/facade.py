"""ReqTrace — the single entry point for one project.

Usage::

    from reqtrace import ReqTrace

    rt = ReqTrace(project_root="/path/to/project")
    rt.write_artifact("requirements/REQ-001.md", "# Login\\n...")
    sha = rt.commit_artifact("requirements/REQ-001.md", "add REQ-001")
    rt.history("requirements/REQ-001.md")
    rt.read_at(sha, "requirements/REQ-001.md")
    rt.status()
    rt.snapshot(sha)
    rt.create_baseline("v1.0", "First review")
"""

from __future__ import annotations

import logging
from pathlib import Path

from reqtrace.artifacts.store import ArtifactStore
from reqtrace.models.commit import Baseline, CommitInfo, FileStatus
from reqtrace.settings import ConfigManager, Identity, set_identity
from reqtrace.vcs import baselines as baseline_ops
from reqtrace.vcs import commits as commit_ops
from reqtrace.vcs import history as history_ops
from reqtrace.vcs.repo import RepoManager

logger = logging.getLogger(__name__)


class ReqTrace:
    """The public interface for a ReqTrace project.

    Loads configuration, fixes the commit identity, and creates the
    artifact folders and git repository when they are missing.

    Parameters
    ----------
    project_root:
        Root directory of the project.
    identity:
        Commit author.  Taken from configuration when *None*.
    """

    def __init__(
        self,
        project_root: str | Path,
        *,
        identity: Identity | None = None,
    ) -> None:
        self.project_root = Path(project_root).resolve()

        self._config_manager = ConfigManager()
        self.config = self._config_manager.load_config(self.project_root)
        self._config_manager.apply_logging(self.config)
        self.history_depth = self._config_manager.history_depth(self.config)

        self.identity = identity or Identity.from_config(self.config)
        set_identity(self.identity)

        self.store = ArtifactStore(self.project_root)
        self.store.create_project_directory()

        self.repo = RepoManager(self.project_root)
        if not self.repo.is_repo():
            self.repo.init_repo()

    # -- Artifacts ------------------------------------------------------------

    def write_artifact(self, path: str | Path, content: str) -> Path:
        return self.store.write(path, content)

    def read_artifact(self, path: str | Path) -> str:
        return self.store.read(path)

    def list_artifacts(self, artifact_type: str) -> list[str]:
        return self.store.list_artifacts(artifact_type)

    def delete_artifact(self, path: str | Path) -> None:
        self.store.delete(path)

    # -- Commits --------------------------------------------------------------

    def commit(self, message: str) -> str:
        """Commit every change in the project.  Returns the commit hash."""
        return commit_ops.commit_all(self.repo, message, self.identity)

    def commit_artifact(self, path: str | Path, message: str) -> str:
        """Commit a single artifact, including its deletion."""
        return commit_ops.commit_path(self.repo, path, message, self.identity)

    def status(self) -> list[FileStatus]:
        return self.repo.status()

    # -- History --------------------------------------------------------------

    def history(
        self,
        path: str | Path | None = None,
        *,
        ref: str | None = None,
        max_count: int | None = None,
    ) -> list[CommitInfo]:
        """Return commits touching *path* (all commits when *None*), newest first.

        *max_count* defaults to the configured ``REQTRACE_HISTORY_DEPTH``.
        """
        if max_count is None:
            max_count = self.history_depth
        return history_ops.resolve_history(self.repo, path, ref=ref, max_count=max_count)

    def read_at(self, commit_hash: str, path: str | Path) -> str:
        return history_ops.read_blob_at(self.repo, commit_hash, path)

    def changed_paths(self, commit_hash: str) -> list[str]:
        return history_ops.changed_paths(self.repo, commit_hash)

    def snapshot(self, commit_hash: str) -> dict[str, dict[str, str]]:
        """Return every artifact as it was at *commit_hash*, by folder."""
        return history_ops.snapshot_at(self.repo, commit_hash)

    # -- Baselines ------------------------------------------------------------

    def create_baseline(self, name: str, message: str) -> Baseline:
        return baseline_ops.create_baseline(self.repo, name, message, identity=self.identity)

    def list_baselines(self) -> list[Baseline]:
        return baseline_ops.list_baselines(self.repo)

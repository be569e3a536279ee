"""Repository operations addressed by project path.

Every function opens the repository afresh, runs one operation, and
returns; nothing is cached between calls.
"""

from __future__ import annotations

from pathlib import Path

from reqtrace.models.commit import Baseline, CommitInfo, FileStatus
from reqtrace.settings import Identity
from reqtrace.vcs import baselines as baseline_ops
from reqtrace.vcs import commits as commit_ops
from reqtrace.vcs import history as history_ops
from reqtrace.vcs.repo import RepoManager


def init_repository(path: str | Path) -> str:
    """Initialise a git repository at *path* and return a confirmation."""
    RepoManager(path).init_repo()
    return "Repository initialized successfully"


def commit_all(path: str | Path, message: str, *, identity: Identity | None = None) -> str:
    """Commit every change in the working tree.  Returns the commit hash."""
    return commit_ops.commit_all(RepoManager.open(path), message, identity)


def commit_path(
    path: str | Path,
    file_path: str | Path,
    message: str,
    *,
    identity: Identity | None = None,
) -> str:
    """Commit a single file.  Returns the commit hash."""
    return commit_ops.commit_path(RepoManager.open(path), file_path, message, identity)


def history(
    path: str | Path,
    file_path: str | Path | None = None,
    *,
    ref: str | None = None,
    max_count: int | None = None,
) -> list[CommitInfo]:
    """Return the commits that touched *file_path* (or all commits), newest first."""
    return history_ops.resolve_history(
        RepoManager.open(path), file_path, ref=ref, max_count=max_count,
    )


def read_blob_at(path: str | Path, commit_hash: str, file_path: str | Path) -> str:
    """Return the content of *file_path* at *commit_hash*."""
    return history_ops.read_blob_at(RepoManager.open(path), commit_hash, file_path)


def status(path: str | Path) -> list[FileStatus]:
    """Return the working-tree state of changed and untracked files."""
    return RepoManager.open(path).status()


def changed_paths(path: str | Path, commit_hash: str) -> list[str]:
    """Return the files a commit added, removed, or modified."""
    return history_ops.changed_paths(RepoManager.open(path), commit_hash)


def list_files_at(path: str | Path, commit_hash: str) -> list[str]:
    """Return every file recorded in a commit."""
    return history_ops.list_files_at(RepoManager.open(path), commit_hash)


def create_baseline(
    path: str | Path,
    name: str,
    message: str,
    *,
    identity: Identity | None = None,
) -> Baseline:
    """Tag head as a named baseline."""
    return baseline_ops.create_baseline(RepoManager.open(path), name, message, identity=identity)


def list_baselines(path: str | Path) -> list[Baseline]:
    """Return all baselines, newest first."""
    return baseline_ops.list_baselines(RepoManager.open(path))

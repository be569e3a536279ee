"""Commit helpers — whole-tree and single-artifact commits.

Commits are assembled from plumbing (``write-tree``, ``commit-tree``,
``update-ref``) so the author identity comes from configuration rather
than from whatever user git config happens to be present.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from reqtrace.settings import Identity, get_identity
from reqtrace.vcs.objects import resolve_head
from reqtrace.vcs.repo import RepoManager, _run_git

logger = logging.getLogger(__name__)


def create_commit(
    repo: RepoManager,
    tree: str,
    message: str,
    parents: Sequence[str] = (),
    identity: Identity | None = None,
) -> str:
    """Write a commit object for *tree* and move head to it.

    Head is updated with a compare-and-swap: it must still point at the
    first parent (or be unborn for a root commit).  If another writer moved
    it after the parents were chosen, this call fails instead of silently
    dropping history.

    Parameters
    ----------
    repo:
        The repository manager.
    tree:
        Id of the tree the commit records.
    message:
        Commit message.
    parents:
        Parent commit ids; empty for a root commit.  The first parent is
        the expected current head.
    identity:
        Author and committer.  Defaults to the process-wide identity.

    Returns
    -------
    str
        The full commit hash.
    """
    identity = identity or get_identity()
    expected_head = parents[0] if parents else ""

    args = ["commit-tree", "--no-gpg-sign", tree, "-m", message]
    for parent in parents:
        args += ["-p", parent]

    result = _run_git(*args, cwd=repo.path, env=identity.git_env())
    oid = result.stdout.strip()

    _run_git(
        "update-ref", "-m", f"commit: {message.splitlines()[0] if message else ''}",
        "HEAD", oid, expected_head,
        cwd=repo.path,
    )
    return oid


def _commit_index(repo: RepoManager, message: str, identity: Identity | None) -> str:
    tree = repo.write_tree()
    head = resolve_head(repo)
    parents = [head] if head is not None else []
    return create_commit(repo, tree, message, parents, identity)


def commit_all(
    repo: RepoManager,
    message: str,
    identity: Identity | None = None,
) -> str:
    """Stage all changes and create a single commit.

    A commit is written even when nothing changed.

    Returns the full commit hash.
    """
    repo.stage_all()
    sha = _commit_index(repo, message, identity)

    logger.info("Committed all changes (%s)", sha[:7])
    return sha


def commit_path(
    repo: RepoManager,
    file_path: str | Path,
    message: str,
    identity: Identity | None = None,
) -> str:
    """Stage a single path and commit it.

    Parameters
    ----------
    repo:
        The repository manager.
    file_path:
        Path to the file (absolute or relative to repo root).  A file that
        no longer exists in the working tree is committed as removed.
    message:
        Commit message.
    identity:
        Author identity.  Defaults to the process-wide identity.

    Returns
    -------
    str
        The full commit hash.
    """
    rel_path = repo.relative_path(file_path)
    repo.stage(rel_path)
    sha = _commit_index(repo, message, identity)

    logger.info("Committed %s (%s)", rel_path, sha[:7])
    return sha

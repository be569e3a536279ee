"""History and snapshot queries — path-scoped log, changed files, reads at a commit.

The log is reconstructed by walking the commit graph from head and
comparing the tree entry of the requested path in each commit against
the same entry in its parents.  No ``git log -- <path>`` history
simplification is involved, so merge handling is exactly the rule
implemented in :func:`_touches_path`.
"""

from __future__ import annotations

import logging
from pathlib import Path

from reqtrace.config import ARTIFACT_DIRS, ARTIFACT_EXTENSION, UNKNOWN_AUTHOR
from reqtrace.models.commit import CommitInfo
from reqtrace.vcs.objects import (
    CommitObject,
    blob_content,
    entry_content_id,
    list_tree_files,
    load_commit,
    resolve_commit,
    resolve_head,
    tree_lookup,
    walk_from,
)
from reqtrace.vcs.repo import NotFoundError, RepoManager, _run_git

logger = logging.getLogger(__name__)


class _PathLookup:
    """Memoized lookups of one path across many trees and commits.

    Each commit is loaded, and each tree searched, at most once per
    history query even though a commit is seen both as a walk step and as
    a parent of its children.
    """

    def __init__(self, repo: RepoManager, path: str) -> None:
        self.repo = repo
        self.path = path
        self._trees: dict[str, str | None] = {}
        self._commit_trees: dict[str, str | None] = {}

    def remember(self, commit: CommitObject) -> None:
        self._commit_trees[commit.oid] = commit.tree

    def entry_id(self, tree: str) -> str | None:
        """Return the content id of the path in *tree*, or *None* if absent."""
        if tree not in self._trees:
            try:
                entry = tree_lookup(self.repo, tree, self.path)
            except NotFoundError as exc:
                logger.warning("Treating %s as absent in tree %s: %s", self.path, tree, exc)
                entry = None
            self._trees[tree] = entry_content_id(entry) if entry is not None else None
        return self._trees[tree]

    def entry_id_at(self, commit_oid: str) -> str | None:
        """Return the content id of the path in a commit's tree."""
        if commit_oid not in self._commit_trees:
            try:
                self._commit_trees[commit_oid] = load_commit(self.repo, commit_oid).tree
            except NotFoundError as exc:
                logger.warning("Treating %s as absent in commit %s: %s", self.path, commit_oid, exc)
                self._commit_trees[commit_oid] = None
        tree = self._commit_trees[commit_oid]
        if tree is None:
            return None
        return self.entry_id(tree)


def _touches_path(commit: CommitObject, lookup: _PathLookup) -> bool:
    """Decide whether *commit* added, removed, or changed the tracked path.

    A root commit touches the path when the path exists in it.  Any other
    commit touches it when at least one parent disagrees on presence or
    content.  A merge that agrees with every parent does not.
    """
    current = lookup.entry_id(commit.tree)
    if commit.is_root:
        return current is not None

    for parent in commit.parents:
        if lookup.entry_id_at(parent) != current:
            return True
    return False


def _to_commit_info(commit: CommitObject) -> CommitInfo:
    return CommitInfo(
        hash=commit.oid,
        message=commit.message or "",
        author=commit.author or UNKNOWN_AUTHOR,
        timestamp=commit.timestamp,
    )


def resolve_history(
    repo: RepoManager,
    path: str | Path | None = None,
    *,
    ref: str | None = None,
    max_count: int | None = None,
) -> list[CommitInfo]:
    """Return the commits that changed *path*, newest first.

    Parameters
    ----------
    repo:
        An opened repository manager.
    path:
        File or folder to scope the history to (absolute or relative to
        the repo root).  *None* returns every commit reachable from the
        start commit.
    ref:
        Commit to start from.  Defaults to head.
    max_count:
        Maximum number of entries to return.

    Returns a list of :class:`CommitInfo`, in graph-walk order.  An
    unborn head, or a path that never existed, gives an empty list.

    Raises
    ------
    NotFoundError
        If *ref* is given and does not name a commit.
    RepositoryError
        If the commit walk cannot be started.
    """
    if ref is None:
        start = resolve_head(repo)
        if start is None:
            return []
    else:
        start = resolve_commit(repo, ref)

    if max_count is not None and max_count <= 0:
        return []

    lookup = _PathLookup(repo, repo.relative_path(path)) if path is not None else None
    walk_limit = max_count if lookup is None else None

    entries: list[CommitInfo] = []
    with walk_from(repo, start, max_count=walk_limit) as walk:
        for oid in walk:
            commit = load_commit(repo, oid)
            if lookup is not None:
                lookup.remember(commit)
                if not _touches_path(commit, lookup):
                    continue
            entries.append(_to_commit_info(commit))
            if max_count is not None and len(entries) >= max_count:
                break

    logger.debug(
        "History for %s: %d commits from %s",
        lookup.path if lookup else "<all>", len(entries), start[:7],
    )
    return entries


def changed_paths(repo: RepoManager, commit_hash: str) -> list[str]:
    """Return the files a commit added, removed, or modified.

    Compared against the first parent; every file counts for a root commit.
    """
    commit = load_commit(repo, resolve_commit(repo, commit_hash))
    if commit.is_root:
        return list_tree_files(repo, commit.tree)

    result = _run_git(
        "diff-tree", "-r", "-z", "--name-only", "--no-renames",
        commit.parents[0], commit.oid,
        cwd=repo.path,
    )
    return [p for p in result.stdout.split("\0") if p]


def list_files_at(repo: RepoManager, commit_hash: str) -> list[str]:
    """Return every file path recorded in a commit."""
    commit = load_commit(repo, resolve_commit(repo, commit_hash))
    return list_tree_files(repo, commit.tree)


def read_blob_at(repo: RepoManager, commit_hash: str, file_path: str | Path) -> str:
    """Return the text of *file_path* as recorded in *commit_hash*.

    Raises
    ------
    NotFoundError
        If the commit does not exist or has no such file.
    DecodeError
        If the file is not UTF-8 text.
    """
    rel_path = repo.relative_path(file_path)
    commit = load_commit(repo, resolve_commit(repo, commit_hash))
    entry = tree_lookup(repo, commit.tree, rel_path)
    if entry is None or entry.type != "blob":
        raise NotFoundError(f"File not found in commit {commit.oid[:7]}: {rel_path}")
    return blob_content(repo, entry)


def snapshot_at(repo: RepoManager, commit_hash: str) -> dict[str, dict[str, str]]:
    """Load every artifact as it was at *commit_hash*.

    Returns ``{artifact_dir: {file_name: content}}`` with one key per
    artifact folder, empty when the folder held nothing at that commit.
    """
    commit = load_commit(repo, resolve_commit(repo, commit_hash))
    snapshot: dict[str, dict[str, str]] = {name: {} for name in ARTIFACT_DIRS}

    for file_path in list_tree_files(repo, commit.tree):
        folder, _, name = file_path.partition("/")
        if folder not in snapshot or "/" in name or not name.endswith(ARTIFACT_EXTENSION):
            continue
        entry = tree_lookup(repo, commit.tree, file_path)
        if entry is not None:
            snapshot[folder][name] = blob_content(repo, entry)
    return snapshot

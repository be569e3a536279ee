"""Object store access — head resolution, commit walks, and tree/blob reads.

Thin readers over git plumbing (``rev-parse``, ``rev-list``, ``cat-file``,
``ls-tree``).  Nothing in this module writes to the repository.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from reqtrace.vcs.repo import DecodeError, NotFoundError, RepoManager, RepositoryError, _run_git

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitObject:
    """A parsed commit."""

    oid: str
    tree: str
    parents: tuple[str, ...]
    author: str | None
    timestamp: int
    message: str

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


@dataclass(frozen=True)
class TreeEntry:
    """A single entry of a tree, addressed by its full path."""

    mode: str
    type: str
    oid: str
    path: str


def entry_content_id(entry: TreeEntry) -> str:
    """Return the identifier that decides content equality of two entries."""
    return entry.oid


def resolve_head(repo: RepoManager) -> str | None:
    """Return the commit id head points at, or *None* for an unborn head."""
    result = _run_git(
        "rev-parse", "--verify", "-q", "HEAD^{commit}",
        cwd=repo.path,
        check=False,
    )
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def resolve_commit(repo: RepoManager, rev: str) -> str:
    """Resolve *rev* (hash, abbreviated hash, tag, branch) to a full commit id.

    Raises
    ------
    NotFoundError
        If *rev* does not name a commit.
    """
    result = _run_git(
        "rev-parse", "--verify", "-q", f"{rev}^{{commit}}",
        cwd=repo.path,
        check=False,
    )
    if result.returncode != 0:
        raise NotFoundError(f"Invalid commit reference: {rev}")
    return result.stdout.strip()


class CommitWalk:
    """Forward-only iterator over the commits reachable from *start*.

    Commits come out in topological order (children before parents), each
    exactly once.  A walk cannot be rewound; start a new one instead.
    Use it as a context manager so an abandoned walk releases its process.
    """

    def __init__(self, repo: RepoManager, start: str, max_count: int | None = None) -> None:
        args = ["rev-list", "--topo-order"]
        if max_count is not None:
            args.append(f"--max-count={max_count}")
        args.append(start)

        logger.debug("git %s (cwd=%s)", " ".join(args), repo.path)
        try:
            self._proc = subprocess.Popen(
                ["git", *args],
                cwd=repo.path,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
            )
        except OSError as exc:
            raise RepositoryError(f"Failed to start commit walk: {exc}") from exc
        self._done = False

    def __iter__(self) -> CommitWalk:
        return self

    def __next__(self) -> str:
        if self._done:
            raise StopIteration
        line = self._proc.stdout.readline()
        if line:
            return line.strip()
        self._finish()
        raise StopIteration

    def __enter__(self) -> CommitWalk:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _finish(self) -> None:
        self._done = True
        stderr = self._proc.stderr.read()
        returncode = self._proc.wait()
        self._proc.stdout.close()
        self._proc.stderr.close()
        if returncode != 0:
            raise RepositoryError(
                f"git rev-list failed (rc={returncode}): {stderr.strip()}"
            )

    def close(self) -> None:
        """Stop the walk early."""
        if self._done:
            return
        self._done = True
        self._proc.kill()
        self._proc.wait()
        self._proc.stdout.close()
        self._proc.stderr.close()


def walk_from(repo: RepoManager, start: str, max_count: int | None = None) -> CommitWalk:
    """Begin a commit walk at *start*."""
    return CommitWalk(repo, start, max_count=max_count)


def _parse_person(value: bytes) -> tuple[str | None, int]:
    """Split ``Name <email> 1700000000 +0100`` into name and epoch seconds."""
    ident, _, when = value.rpartition(b">")
    name = ident.rpartition(b"<")[0].strip().decode("utf-8", errors="replace")
    try:
        timestamp = int(when.split()[0])
    except (IndexError, ValueError):
        timestamp = 0
    return name or None, timestamp


def load_commit(repo: RepoManager, oid: str) -> CommitObject:
    """Read and parse the commit *oid*.

    Raises
    ------
    NotFoundError
        If *oid* is not a commit in the object store.
    """
    result = _run_git("cat-file", "commit", oid, cwd=repo.path, check=False, binary=True)
    if result.returncode != 0:
        raise NotFoundError(f"Failed to find commit {oid}")

    header, _, body = result.stdout.partition(b"\n\n")
    tree = ""
    parents: list[str] = []
    author: str | None = None
    timestamp = 0

    for line in header.split(b"\n"):
        if line.startswith(b" "):
            # Continuation of a multi-line header such as gpgsig
            continue
        key, _, value = line.partition(b" ")
        if key == b"tree":
            tree = value.decode("ascii")
        elif key == b"parent":
            parents.append(value.decode("ascii"))
        elif key == b"author":
            author, timestamp = _parse_person(value)

    return CommitObject(
        oid=oid,
        tree=tree,
        parents=tuple(parents),
        author=author,
        timestamp=timestamp,
        message=body.decode("utf-8", errors="replace").rstrip("\n"),
    )


def tree_lookup(repo: RepoManager, tree: str, path: str) -> TreeEntry | None:
    """Return the entry at *path* inside *tree*, or *None* if absent.

    Raises
    ------
    NotFoundError
        If *tree* itself cannot be read.
    """
    result = _run_git(
        "ls-tree", "-z", "--full-tree", tree, "--", path,
        cwd=repo.path,
        check=False,
    )
    if result.returncode != 0:
        raise NotFoundError(f"Failed to read tree {tree}: {result.stderr.strip()}")

    for record in result.stdout.split("\0"):
        meta, _, entry_path = record.partition("\t")
        if entry_path != path:
            continue
        mode, obj_type, oid = meta.split()
        return TreeEntry(mode=mode, type=obj_type, oid=oid, path=entry_path)
    return None


def list_tree_files(repo: RepoManager, tree: str) -> list[str]:
    """Return the path of every file below *tree*."""
    result = _run_git(
        "ls-tree", "-r", "-z", "--name-only", "--full-tree", tree,
        cwd=repo.path,
        check=False,
    )
    if result.returncode != 0:
        raise NotFoundError(f"Failed to read tree {tree}: {result.stderr.strip()}")
    return [p for p in result.stdout.split("\0") if p]


def blob_content(repo: RepoManager, entry: TreeEntry | str) -> str:
    """Return the text content of a blob.

    Raises
    ------
    NotFoundError
        If the blob does not exist.
    DecodeError
        If the content is not valid UTF-8.
    """
    oid = entry.oid if isinstance(entry, TreeEntry) else entry
    result = _run_git("cat-file", "blob", oid, cwd=repo.path, check=False, binary=True)
    if result.returncode != 0:
        raise NotFoundError(f"Failed to find blob {oid}")
    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Failed to decode UTF-8 in blob {oid}: {exc}") from exc

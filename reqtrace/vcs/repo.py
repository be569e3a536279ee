"""RepoManager — open, initialise, stage, and query a git repository.

All git operations use :func:`subprocess.run`; no GitPython dependency.
"""

from __future__ import annotations

import logging
import os
import posixpath
import subprocess
from pathlib import Path

from reqtrace.config import DEFAULT_BRANCH
from reqtrace.models.commit import FileState, FileStatus

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when a repository cannot be opened, initialised, or read."""


class NotFoundError(RepositoryError):
    """Raised when a commit, tree entry, or blob does not exist."""


class DecodeError(Exception):
    """Raised when blob content is not valid UTF-8 text."""


def _run_git(
    *args: str,
    cwd: str | Path | None = None,
    check: bool = True,
    env: dict[str, str] | None = None,
    binary: bool = False,
) -> subprocess.CompletedProcess:
    """Execute a git command via subprocess and return the result.

    Parameters
    ----------
    *args:
        Arguments passed after ``git``.
    cwd:
        Working directory for the command.
    check:
        If *True*, raise :class:`RepositoryError` on non-zero exit.
    env:
        Extra environment variables layered over the current environment.
    binary:
        If *True*, stdout is returned as raw bytes instead of text.
    """
    cmd = ["git", *args]
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)

    full_env = None
    if env:
        full_env = {**os.environ, **env}

    try:
        if binary:
            result = subprocess.run(cmd, cwd=cwd, capture_output=True, env=full_env)
        else:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=full_env,
            )
    except OSError as exc:
        raise RepositoryError(f"git {' '.join(args)} could not be started: {exc}") from exc

    if check and result.returncode != 0:
        stderr = result.stderr
        if isinstance(stderr, bytes):
            stderr = stderr.decode("utf-8", errors="replace")
        raise RepositoryError(
            f"git {' '.join(args)} failed (rc={result.returncode}): "
            f"{stderr.strip()}"
        )
    return result


def _classify(code: str) -> FileState:
    """Map a porcelain ``XY`` status code to a :data:`FileState`."""
    if "D" in code:
        return "deleted"
    if code == "??" or code[0] == "A":
        return "new"
    if any(c in "MTR" for c in code):
        return "modified"
    return "unchanged"


class RepoManager:
    """Manage the git repository behind a ReqTrace project.

    Parameters
    ----------
    path:
        Root directory of the repository.  Can be an existing repo or a
        path to initialise.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).resolve()

    @classmethod
    def open(cls, path: str | Path) -> RepoManager:
        """Return a manager for the existing repository rooted at *path*.

        Raises
        ------
        RepositoryError
            If *path* is not the root of a git working tree.
        """
        repo = cls(path)
        if not repo.is_repo():
            raise RepositoryError(
                f"Failed to open repository: {repo.path} is not a git repository"
            )
        return repo

    # -- Initialisation -------------------------------------------------------

    def init_repo(self) -> Path:
        """Initialise a git repository without creating any commit.

        Head is pointed at ``refs/heads/main`` so the first commit starts
        that branch.  Re-initialising an existing repository is harmless.

        Returns the repo root path.
        """
        self.path.mkdir(parents=True, exist_ok=True)
        _run_git("init", cwd=self.path)

        unborn = _run_git("rev-parse", "--verify", "-q", "HEAD", cwd=self.path, check=False)
        if unborn.returncode != 0:
            _run_git("symbolic-ref", "HEAD", f"refs/heads/{DEFAULT_BRANCH}", cwd=self.path)

        _run_git("config", "commit.gpgsign", "false", cwd=self.path, check=False)
        _run_git("config", "tag.gpgSign", "false", cwd=self.path, check=False)

        logger.info("Initialised repository at %s", self.path)
        return self.path

    # -- Status / info --------------------------------------------------------

    def is_repo(self) -> bool:
        """Return *True* if *self.path* is the root of a git working tree."""
        if not self.path.is_dir():
            return False
        result = _run_git(
            "rev-parse", "--show-toplevel",
            cwd=self.path,
            check=False,
        )
        if result.returncode != 0:
            return False
        return Path(result.stdout.strip()).resolve() == self.path

    def status(self) -> list[FileStatus]:
        """Return the working-tree state of every changed or untracked file."""
        result = _run_git(
            "status", "--porcelain=v1", "-z", "--untracked-files=all",
            cwd=self.path,
        )
        records = result.stdout.split("\0")
        statuses: list[FileStatus] = []
        i = 0
        while i < len(records):
            record = records[i]
            i += 1
            if len(record) < 4:
                continue
            code, path = record[:2], record[3:]
            if code[0] in "RC":
                # The original path of a rename or copy follows as its own record
                i += 1
            statuses.append(FileStatus(path=path, status=_classify(code)))
        return statuses

    def is_clean(self) -> bool:
        """Return *True* if the working tree has no uncommitted changes."""
        return not self.status()

    def relative_path(self, file_path: str | Path) -> str:
        """Return *file_path* as a slash-separated path relative to the repo root.

        Absolute paths must lie inside the repository; relative paths are
        taken relative to the repository root.
        """
        path = Path(file_path)
        if path.is_absolute():
            try:
                path = path.resolve().relative_to(self.path)
            except ValueError:
                raise RepositoryError(
                    f"{file_path} is outside the repository at {self.path}"
                ) from None
        rel = posixpath.normpath(path.as_posix())
        if rel == "." or rel == ".." or rel.startswith("../"):
            raise RepositoryError(f"{file_path!r} does not name a path in the repository")
        return rel

    # -- Stage / tree ---------------------------------------------------------

    def stage(self, *paths: str | Path) -> None:
        """Stage one or more paths, including their removal."""
        str_paths = [self.relative_path(p) for p in paths]
        _run_git("add", "-A", "--", *str_paths, cwd=self.path)

    def stage_all(self) -> None:
        """Stage every change in the working tree."""
        _run_git("add", "-A", cwd=self.path)

    def write_tree(self) -> str:
        """Write the index as a tree object and return its id."""
        result = _run_git("write-tree", cwd=self.path)
        return result.stdout.strip()

"""Baselines — named project snapshots recorded as annotated git tags."""

from __future__ import annotations

import logging

from reqtrace.models.commit import Baseline
from reqtrace.settings import Identity, get_identity
from reqtrace.vcs.objects import resolve_commit
from reqtrace.vcs.repo import RepoManager, RepositoryError, _run_git

logger = logging.getLogger(__name__)

_TAG_FORMAT = (
    "%(refname:short)%00%(objecttype)%00%(objectname)%00%(*objectname)"
    "%00%(creatordate:unix)%00%(contents:subject)"
)


def create_baseline(
    repo: RepoManager,
    name: str,
    message: str,
    *,
    ref: str = "HEAD",
    identity: Identity | None = None,
) -> Baseline:
    """Tag *ref* (head by default) as baseline *name*.

    Raises
    ------
    NotFoundError
        If *ref* does not name a commit (e.g. the repository is empty).
    RepositoryError
        If the tag already exists or is not a valid tag name.
    """
    identity = identity or get_identity()
    commit = resolve_commit(repo, ref)

    check = _run_git("check-ref-format", f"refs/tags/{name}", cwd=repo.path, check=False)
    if check.returncode != 0:
        raise RepositoryError(f"Invalid baseline name: {name!r}")

    _run_git(
        "-c", "tag.gpgSign=false",
        "tag", "-a", name, "-m", message, commit,
        cwd=repo.path,
        env=identity.git_env(),
    )
    logger.info("Created baseline '%s' at %s", name, commit[:7])

    for baseline in list_baselines(repo):
        if baseline.name == name:
            return baseline
    raise RepositoryError(f"Baseline {name!r} was not recorded")


def list_baselines(repo: RepoManager) -> list[Baseline]:
    """Return every baseline, newest first.

    Lightweight tags are included using their commit's date and subject.
    """
    result = _run_git("for-each-ref", f"--format={_TAG_FORMAT}", "refs/tags", cwd=repo.path)

    baselines: list[Baseline] = []
    for line in result.stdout.splitlines():
        parts = line.split("\0")
        if len(parts) < 6:
            continue
        name, obj_type, oid, peeled, created, subject = parts[:6]
        if obj_type not in ("tag", "commit") or (obj_type == "tag" and not peeled):
            continue
        baselines.append(
            Baseline(
                name=name,
                message=subject,
                timestamp=int(created or 0),
                commit=peeled if obj_type == "tag" else oid,
            )
        )

    baselines.sort(key=lambda b: b.timestamp, reverse=True)
    return baselines

"""Version control — git-backed history for project artifacts.

Path-scoped history is reconstructed by tree comparison against each
commit's parents; commits are written with a configured identity.
"""

from reqtrace.vcs.repo import DecodeError, NotFoundError, RepoManager, RepositoryError

__all__ = ["DecodeError", "NotFoundError", "RepoManager", "RepositoryError"]

"""ReqTrace — version-controlled requirements, use-cases, and test-cases."""

__version__ = "1.0.0"

from reqtrace.api.facade import ReqTrace
from reqtrace.artifacts.store import ArtifactStore
from reqtrace.models.commit import Baseline, CommitInfo, FileStatus
from reqtrace.settings import ConfigManager, Identity, get_identity, set_identity
from reqtrace.vcs.history import resolve_history
from reqtrace.vcs.repo import DecodeError, NotFoundError, RepoManager, RepositoryError

__all__ = [
    "__version__",
    # Facade
    "ReqTrace",
    # Storage and version control
    "ArtifactStore",
    "RepoManager",
    "resolve_history",
    # Records
    "Baseline",
    "CommitInfo",
    "FileStatus",
    # Configuration
    "ConfigManager",
    "Identity",
    "get_identity",
    "set_identity",
    # Errors
    "DecodeError",
    "NotFoundError",
    "RepositoryError",
]

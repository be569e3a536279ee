"""Pydantic records returned by the public API."""

from reqtrace.models.commit import Baseline, CommitInfo, FileStatus

__all__ = ["Baseline", "CommitInfo", "FileStatus"]

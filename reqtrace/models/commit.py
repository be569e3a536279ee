"""CommitInfo, FileStatus, Baseline — the records the public API returns."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

FileState = Literal["new", "modified", "deleted", "unchanged"]


class CommitInfo(BaseModel):
    """One entry of a history listing."""

    hash: str
    message: str = ""
    author: str
    timestamp: int
    """Author time in seconds since the epoch, no timezone adjustment."""


class FileStatus(BaseModel):
    """Working-tree state of a single file."""

    path: str
    status: FileState


class Baseline(BaseModel):
    """A named, tagged snapshot of the project."""

    name: str
    message: str = ""
    timestamp: int
    commit: str

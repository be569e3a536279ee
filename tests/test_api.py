"""Tests for the public API — path-based git operations and the ReqTrace facade.

All tests use temporary directories with real git repos.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from reqtrace import ReqTrace
from reqtrace.api import git_ops
from reqtrace.api.files import write_artifact_file
from reqtrace.models.commit import CommitInfo, FileStatus
from reqtrace.settings import Identity, get_identity, reset_identity
from reqtrace.vcs.repo import NotFoundError, RepositoryError

IDENTITY = Identity(name="API Test", email="api@reqtrace.dev")


@pytest.fixture(autouse=True)
def clean_identity(monkeypatch: pytest.MonkeyPatch):
    for key in ("REQTRACE_ENV", "REQTRACE_AUTHOR_NAME", "REQTRACE_AUTHOR_EMAIL",
                "REQTRACE_LOG_LEVEL", "REQTRACE_HISTORY_DEPTH"):
        monkeypatch.delenv(key, raising=False)
    reset_identity()
    yield
    reset_identity()


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    assert git_ops.init_repository(root) == "Repository initialized successfully"
    return root


# ---------------------------------------------------------------------------
# Path-based git operations
# ---------------------------------------------------------------------------


class TestGitOps:
    def test_history_scenario(self, project: Path):
        write_artifact_file(project / "requirements" / "r1.md", "A")
        added = git_ops.commit_path(project, "requirements/r1.md", "add r1", identity=IDENTITY)

        history = git_ops.history(project, "requirements/r1.md")
        assert len(history) == 1
        assert history[0].hash == added

        write_artifact_file(project / "requirements" / "r1.md", "B")
        updated = git_ops.commit_path(project, "requirements/r1.md", "update r1", identity=IDENTITY)

        history = git_ops.history(project, "requirements/r1.md")
        assert [c.hash for c in history] == [updated, added]
        assert [c.message for c in history] == ["update r1", "add r1"]
        assert all(isinstance(c, CommitInfo) for c in history)

    def test_commit_then_read_back(self, project: Path):
        write_artifact_file(project / "usecases" / "u1.md", "first draft")
        sha = git_ops.commit_path(project, "usecases/u1.md", "draft", identity=IDENTITY)
        write_artifact_file(project / "usecases" / "u1.md", "second draft")

        assert git_ops.read_blob_at(project, sha, "usecases/u1.md") == "first draft"

    def test_commit_all_and_full_history(self, project: Path):
        write_artifact_file(project / "requirements" / "r1.md", "A")
        write_artifact_file(project / "testcases" / "t1.md", "T")
        first = git_ops.commit_all(project, "initial", identity=IDENTITY)
        write_artifact_file(project / "testcases" / "t1.md", "T2")
        second = git_ops.commit_all(project, "update t1", identity=IDENTITY)

        assert [c.hash for c in git_ops.history(project)] == [second, first]
        assert [c.hash for c in git_ops.history(project, "requirements/r1.md")] == [first]
        assert git_ops.changed_paths(project, second) == ["testcases/t1.md"]
        assert sorted(git_ops.list_files_at(project, first)) == [
            "requirements/r1.md",
            "testcases/t1.md",
        ]

    def test_parent_segments_in_path(self, project: Path):
        write_artifact_file(project / "requirements" / "r1.md", "A")
        sha = git_ops.commit_path(
            project, "usecases/../requirements/r1.md", "add r1", identity=IDENTITY,
        )

        history = git_ops.history(project, "usecases/../requirements/r1.md")
        assert [c.hash for c in history] == [sha]
        assert git_ops.read_blob_at(project, sha, "usecases/../requirements/r1.md") == "A"

    def test_history_of_empty_repository(self, project: Path):
        assert git_ops.history(project) == []

    def test_history_max_count(self, project: Path):
        for content in ("A", "B", "C"):
            write_artifact_file(project / "requirements" / "r1.md", content)
            git_ops.commit_all(project, content, identity=IDENTITY)

        assert len(git_ops.history(project, "requirements/r1.md", max_count=2)) == 2

    def test_status(self, project: Path):
        write_artifact_file(project / "requirements" / "r1.md", "A")
        statuses = git_ops.status(project)
        assert statuses == [FileStatus(path="requirements/r1.md", status="new")]
        assert git_ops.status(project) == statuses

    def test_default_identity(self, project: Path):
        write_artifact_file(project / "requirements" / "r1.md", "A")
        git_ops.commit_all(project, "initial")
        assert git_ops.history(project)[0].author == "ReqTrace User"

    def test_open_errors(self, tmp_path: Path):
        with pytest.raises(RepositoryError):
            git_ops.history(tmp_path / "not-a-repo")
        with pytest.raises(RepositoryError):
            git_ops.commit_all(tmp_path / "not-a-repo", "nope")
        with pytest.raises(RepositoryError):
            git_ops.status(tmp_path / "not-a-repo")

    def test_read_blob_at_missing(self, project: Path):
        write_artifact_file(project / "requirements" / "r1.md", "A")
        sha = git_ops.commit_all(project, "initial", identity=IDENTITY)
        with pytest.raises(NotFoundError):
            git_ops.read_blob_at(project, sha, "requirements/r2.md")

    def test_baselines(self, project: Path):
        write_artifact_file(project / "requirements" / "r1.md", "A")
        sha = git_ops.commit_all(project, "initial", identity=IDENTITY)

        baseline = git_ops.create_baseline(project, "review-1", "Design review", identity=IDENTITY)
        assert baseline.commit == sha
        assert [b.name for b in git_ops.list_baselines(project)] == ["review-1"]


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------


class TestReqTraceFacade:
    def test_creates_project_and_repo(self, tmp_path: Path):
        rt = ReqTrace(tmp_path / "proj", identity=IDENTITY)
        for name in ("requirements", "usecases", "testcases", "information"):
            assert (rt.project_root / name).is_dir()
        assert rt.repo.is_repo()
        assert rt.history() == []

    def test_identity_installed_process_wide(self, tmp_path: Path):
        ReqTrace(tmp_path / "proj", identity=IDENTITY)
        assert get_identity() == IDENTITY

    def test_identity_from_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("REQTRACE_AUTHOR_NAME", "Configured Author")
        rt = ReqTrace(tmp_path / "proj")
        rt.write_artifact("requirements/r1.md", "A")
        rt.commit("initial")
        assert rt.history()[0].author == "Configured Author"

    def test_artifact_lifecycle(self, tmp_path: Path):
        rt = ReqTrace(tmp_path / "proj", identity=IDENTITY)

        rt.write_artifact("requirements/REQ-001.md", "# Login\n")
        added = rt.commit_artifact("requirements/REQ-001.md", "add REQ-001")
        assert rt.list_artifacts("requirements") == ["REQ-001.md"]

        rt.write_artifact("requirements/REQ-001.md", "# Login v2\n")
        assert rt.status() == [FileStatus(path="requirements/REQ-001.md", status="modified")]
        updated = rt.commit_artifact("requirements/REQ-001.md", "update REQ-001")

        rt.delete_artifact("requirements/REQ-001.md")
        removed = rt.commit_artifact("requirements/REQ-001.md", "remove REQ-001")

        history = rt.history("requirements/REQ-001.md")
        assert [c.hash for c in history] == [removed, updated, added]
        assert rt.read_at(added, "requirements/REQ-001.md") == "# Login\n"
        assert rt.changed_paths(removed) == ["requirements/REQ-001.md"]
        assert rt.status() == []

    def test_snapshot(self, tmp_path: Path):
        rt = ReqTrace(tmp_path / "proj", identity=IDENTITY)
        rt.write_artifact("requirements/r1.md", "R")
        rt.write_artifact("testcases/t1.md", "T")
        sha = rt.commit("initial")
        rt.write_artifact("requirements/r1.md", "R2")
        rt.commit("update")

        snapshot = rt.snapshot(sha)
        assert snapshot["requirements"] == {"r1.md": "R"}
        assert snapshot["testcases"] == {"t1.md": "T"}

    def test_configured_history_depth(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("REQTRACE_HISTORY_DEPTH", "2")
        rt = ReqTrace(tmp_path / "proj", identity=IDENTITY)
        for content in ("A", "B", "C"):
            rt.write_artifact("requirements/r1.md", content)
            rt.commit(content)

        assert len(rt.history()) == 2
        assert len(rt.history(max_count=3)) == 3

    def test_malformed_config_values_fall_back(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.setenv("REQTRACE_HISTORY_DEPTH", "all")
        monkeypatch.setenv("REQTRACE_LOG_LEVEL", "LOUD")
        rt = ReqTrace(tmp_path / "proj", identity=IDENTITY)
        for content in ("A", "B", "C"):
            rt.write_artifact("requirements/r1.md", content)
            rt.commit(content)

        assert rt.history_depth is None
        assert len(rt.history()) == 3

    def test_baselines(self, tmp_path: Path):
        rt = ReqTrace(tmp_path / "proj", identity=IDENTITY)
        rt.write_artifact("requirements/r1.md", "R")
        sha = rt.commit("initial")

        rt.create_baseline("v1", "first baseline")
        (baseline,) = rt.list_baselines()
        assert baseline.commit == sha
        assert baseline.message == "first baseline"

    def test_reopen_existing_project(self, tmp_path: Path):
        rt = ReqTrace(tmp_path / "proj", identity=IDENTITY)
        rt.write_artifact("requirements/r1.md", "R")
        sha = rt.commit("initial")

        again = ReqTrace(tmp_path / "proj", identity=IDENTITY)
        assert [c.hash for c in again.history()] == [sha]

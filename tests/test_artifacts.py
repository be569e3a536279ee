"""Tests for the artifact store and the path-based file operations."""

from __future__ import annotations

from pathlib import Path

import pytest

from reqtrace.api.files import (
    create_project_directory,
    delete_artifact_file,
    list_artifacts,
    read_artifact_file,
    write_artifact_file,
)
from reqtrace.artifacts.store import ArtifactStore
from reqtrace.config import ARTIFACT_DIRS


class TestArtifactStore:
    @pytest.fixture()
    def store(self, tmp_path: Path) -> ArtifactStore:
        store = ArtifactStore(tmp_path / "project")
        store.create_project_directory()
        return store

    def test_create_project_directory(self, tmp_path: Path):
        root = ArtifactStore(tmp_path / "p").create_project_directory()
        assert root == tmp_path / "p"
        for name in ARTIFACT_DIRS:
            assert (root / name).is_dir()

    def test_create_project_directory_twice(self, store: ArtifactStore):
        (store.project_root / "requirements" / "r1.md").write_text("keep")
        store.create_project_directory()
        assert (store.project_root / "requirements" / "r1.md").read_text() == "keep"

    def test_write_and_read_relative(self, store: ArtifactStore):
        target = store.write("requirements/r1.md", "# REQ-1\n")
        assert target == store.project_root / "requirements" / "r1.md"
        assert store.read("requirements/r1.md") == "# REQ-1\n"

    def test_write_absolute(self, store: ArtifactStore):
        target = store.project_root / "usecases" / "u1.md"
        store.write(target, "use case")
        assert store.read(target) == "use case"

    def test_write_creates_parents(self, store: ArtifactStore):
        store.write("information/deep/nested/n.md", "x")
        assert (store.project_root / "information" / "deep" / "nested" / "n.md").is_file()

    def test_overwrite(self, store: ArtifactStore):
        store.write("requirements/r1.md", "A")
        store.write("requirements/r1.md", "B")
        assert store.read("requirements/r1.md") == "B"

    def test_list_filters_by_extension(self, store: ArtifactStore):
        store.write("requirements/b.md", "b")
        store.write("requirements/a.md", "a")
        store.write("requirements/notes.txt", "n")
        (store.project_root / "requirements" / "sub.md").mkdir()

        assert store.list_artifacts("requirements") == ["a.md", "b.md"]
        assert store.list_artifacts("requirements", extension=".txt") == ["notes.txt"]

    def test_list_missing_folder(self, store: ArtifactStore):
        assert store.list_artifacts("risks") == []

    def test_delete(self, store: ArtifactStore):
        store.write("testcases/t1.md", "t")
        store.delete("testcases/t1.md")
        assert store.list_artifacts("testcases") == []

    def test_read_missing_raises(self, store: ArtifactStore):
        with pytest.raises(FileNotFoundError):
            store.read("requirements/ghost.md")

    def test_delete_missing_raises(self, store: ArtifactStore):
        with pytest.raises(OSError):
            store.delete("requirements/ghost.md")


class TestFileOperations:
    def test_round_trip(self, tmp_path: Path):
        root = create_project_directory(tmp_path / "project")
        path = root / "requirements" / "r1.md"

        write_artifact_file(path, "content")
        assert read_artifact_file(path) == "content"
        assert list_artifacts(root, "requirements") == ["r1.md"]

        delete_artifact_file(path)
        assert list_artifacts(root, "requirements") == []

    def test_write_creates_missing_folders(self, tmp_path: Path):
        path = tmp_path / "fresh" / "usecases" / "u1.md"
        write_artifact_file(path, "u")
        assert path.read_text(encoding="utf-8") == "u"

"""Unit tests for tree navigation and blob reading."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from minigit.exceptions import PathNotFoundError, ValidationError
from minigit.repository import (
    BlobReader,
    EntryKind,
    TreeEntry,
    TreeNavigator,
    normalize_tree_path,
    open_repository,
)

if TYPE_CHECKING:
    from tests.conftest import CommitFiles

SUBMODULE_COMMIT = b"1" * 40

FILES = {
    "README.md": b"hello",
    "b.txt": b"",
    "src/app.py": b"print('hi')\n",
    "src/lib/util.py": b"x = 1\n",
    "Docs/guide.md": b"# Guide\n",
}


@pytest.fixture
def commit_id(repo_path: Path, commit_files: "CommitFiles") -> str:
    return commit_files(repo_path, FILES, submodules={"vendor": SUBMODULE_COMMIT})


class TestNormalizeTreePath:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, ""),
            ("", ""),
            ("/", ""),
            ("  ", ""),
            ("src", "src"),
            ("/src/", "src"),
            (" src/lib ", "src/lib"),
            ("//src/lib//", "src/lib"),
        ],
    )
    def test_normalizes(self, raw: str | None, expected: str) -> None:
        assert normalize_tree_path(raw) == expected


class TestListDirectory:
    def test_root_lists_directories_first(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle:
            entries = TreeNavigator().list_directory(handle, commit_id)

        assert [e.name for e in entries] == ["Docs", "src", "b.txt", "README.md", "vendor"]

    @pytest.mark.parametrize("root", [None, "", "/"])
    def test_root_spellings_agree(self, repo_path: Path, commit_id: str, root: str | None) -> None:
        with open_repository(repo_path) as handle:
            entries = TreeNavigator().list_directory(handle, commit_id, root)

        assert len(entries) == 5

    def test_subdirectory_paths_are_relative_to_root(
        self, repo_path: Path, commit_id: str
    ) -> None:
        with open_repository(repo_path) as handle:
            entries = TreeNavigator().list_directory(handle, commit_id, "/src/")

        assert entries == [
            TreeEntry(name="lib", path="src/lib", kind=EntryKind.DIRECTORY),
            TreeEntry(name="app.py", path="src/app.py", kind=EntryKind.FILE, size=12),
        ]

    def test_file_sizes(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle:
            entries = {e.name: e for e in TreeNavigator().list_directory(handle, commit_id)}

        assert entries["README.md"].size == 5
        assert entries["b.txt"].size == 0
        assert entries["Docs"].size is None
        assert entries["Docs"].size_formatted == "-"

    def test_submodule_is_listed_as_empty_file(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle:
            entries = {e.name: e for e in TreeNavigator().list_directory(handle, commit_id)}

        assert entries["vendor"].kind is EntryKind.FILE
        assert entries["vendor"].size == 0

    def test_missing_directory(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle, pytest.raises(PathNotFoundError):
            TreeNavigator().list_directory(handle, commit_id, "nope")

    def test_file_is_not_a_directory(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle, pytest.raises(PathNotFoundError) as exc_info:
            TreeNavigator().list_directory(handle, commit_id, "README.md")

        assert exc_info.value.path == "README.md"


class TestGetEntryInfo:
    def test_file(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle:
            entry = TreeNavigator().get_entry_info(handle, commit_id, "src/lib/util.py")

        assert entry == TreeEntry(
            name="util.py", path="src/lib/util.py", kind=EntryKind.FILE, size=6
        )

    def test_directory(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle:
            entry = TreeNavigator().get_entry_info(handle, commit_id, "src/lib/")

        assert entry.is_directory
        assert entry.path == "src/lib"

    @pytest.mark.parametrize("path", [None, "", "/", "  "])
    def test_empty_path_is_rejected(
        self, repo_path: Path, commit_id: str, path: str | None
    ) -> None:
        with open_repository(repo_path) as handle, pytest.raises(ValidationError) as exc_info:
            TreeNavigator().get_entry_info(handle, commit_id, path)

        assert exc_info.value.field == "path"

    def test_path_through_a_file(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle, pytest.raises(PathNotFoundError):
            TreeNavigator().get_entry_info(handle, commit_id, "README.md/child")


class TestReadFile:
    def test_reads_exact_bytes(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle:
            content = BlobReader().read_file(handle, commit_id, "src/app.py")

        assert content == b"print('hi')\n"

    def test_reads_empty_file(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle:
            assert BlobReader().read_file(handle, commit_id, "b.txt") == b""

    def test_directory_is_rejected(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle, pytest.raises(ValidationError) as exc_info:
            BlobReader().read_file(handle, commit_id, "src")

        assert "is a directory" in str(exc_info.value)

    def test_submodule_has_no_content(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle, pytest.raises(PathNotFoundError):
            BlobReader().read_file(handle, commit_id, "vendor")

    def test_missing_file(self, repo_path: Path, commit_id: str) -> None:
        with open_repository(repo_path) as handle, pytest.raises(PathNotFoundError):
            BlobReader().read_file(handle, commit_id, "missing.txt")

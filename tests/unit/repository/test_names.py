"""Unit tests for repository name validation and normalization."""

import pytest

from minigit.repository import display_name, is_valid_repository_name, normalize_repository_name


class TestIsValidRepositoryName:
    @pytest.mark.parametrize(
        "name",
        ["demo", "demo.git", "my-repo", "my_repo", "Repo123", "a", "A-b_C-9.git"],
    )
    def test_accepts_safe_names(self, name: str) -> None:
        assert is_valid_repository_name(name)

    @pytest.mark.parametrize("name", [None, "", "   ", ".git", "\t"])
    def test_rejects_missing_or_blank(self, name: str | None) -> None:
        assert not is_valid_repository_name(name)

    @pytest.mark.parametrize(
        "name",
        [
            "..",
            "../etc",
            "a/b",
            "a\\b",
            "..%2fetc",
            "demo.git.git",
            "demo.bak",
            "with space",
            "naïve",
            "semi;colon",
            "%2e%2e",
        ],
    )
    def test_rejects_traversal_and_unsafe_characters(self, name: str) -> None:
        assert not is_valid_repository_name(name)

    def test_strips_only_one_suffix(self) -> None:
        assert is_valid_repository_name("demo.git")
        assert not is_valid_repository_name("demo.git.git")


class TestNormalizeRepositoryName:
    def test_appends_suffix(self) -> None:
        assert normalize_repository_name("demo") == "demo.git"

    def test_keeps_existing_suffix(self) -> None:
        assert normalize_repository_name("demo.git") == "demo.git"

    def test_trims_whitespace(self) -> None:
        assert normalize_repository_name("  demo  ") == "demo.git"

    def test_is_idempotent(self) -> None:
        once = normalize_repository_name(" demo ")
        assert normalize_repository_name(once) == once


class TestDisplayName:
    def test_strips_suffix(self) -> None:
        assert display_name("demo.git") == "demo"

    def test_leaves_plain_name(self) -> None:
        assert display_name("demo") == "demo"

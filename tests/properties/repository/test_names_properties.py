"""Property-based tests for repository name handling.

Invariants covered:
- Normalization is idempotent and always yields a ``.git`` suffix
- Every accepted name maps to a single directory directly under the root
- Names containing traversal or separator characters are never accepted
- Tree path normalization strips outer slashes and is idempotent
"""

from pathlib import Path, PurePosixPath

from hypothesis import given, strategies as st

from minigit.exceptions import ValidationError
from minigit.repository import (
    RepositoryStorage,
    is_valid_repository_name,
    normalize_repository_name,
)
from minigit.repository._tree import normalize_tree_path

# =============================================================================
# Strategies
# =============================================================================

_NAME_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_"

safe_name = st.text(alphabet=_NAME_ALPHABET, min_size=1, max_size=40)

maybe_suffixed = st.builds(
    lambda name, suffix: name + suffix, safe_name, st.sampled_from(["", ".git"])
)

unsafe_fragment = st.sampled_from(["..", "/", "\\", "../", "..\\", "a/../b", " ", "%", "\x00"])

unsafe_name = st.builds(
    lambda prefix, fragment, suffix: prefix + fragment + suffix,
    st.text(alphabet=_NAME_ALPHABET, max_size=10),
    unsafe_fragment,
    st.text(alphabet=_NAME_ALPHABET, max_size=10),
)

ROOT = Path("/srv/minigit/repos")


class TestNormalization:
    @given(name=st.text(max_size=60))
    def test_idempotent(self, name: str) -> None:
        once = normalize_repository_name(name)

        assert normalize_repository_name(once) == once
        assert once.endswith(".git")

    @given(name=maybe_suffixed)
    def test_valid_names_stay_valid(self, name: str) -> None:
        assert is_valid_repository_name(name)
        assert is_valid_repository_name(normalize_repository_name(name))


class TestContainment:
    @given(name=maybe_suffixed)
    def test_path_is_direct_child_of_root(self, name: str) -> None:
        path = RepositoryStorage(ROOT).get_repository_path(name)

        assert path.parent == ROOT
        assert path.name == normalize_repository_name(name)

    @given(name=unsafe_name)
    def test_unsafe_names_are_rejected(self, name: str) -> None:
        assert not is_valid_repository_name(name)

        try:
            RepositoryStorage(ROOT).get_repository_path(name)
        except ValidationError:
            pass
        else:
            raise AssertionError(f"accepted unsafe name {name!r}")


class TestTreePaths:
    @given(
        parts=st.lists(st.text(alphabet=_NAME_ALPHABET, min_size=1, max_size=8), max_size=4),
        leading=st.booleans(),
        trailing=st.booleans(),
    )
    def test_normalized_paths_have_no_outer_slashes(
        self, parts: list[str], leading: bool, trailing: bool
    ) -> None:
        raw = ("/" if leading else "") + "/".join(parts) + ("/" if trailing else "")

        normalized = normalize_tree_path(raw)

        assert not normalized.startswith("/")
        assert not normalized.endswith("/")
        assert PurePosixPath(normalized).parts == tuple(parts) or normalized == ""
        assert normalize_tree_path(normalized) == normalized

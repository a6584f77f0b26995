"""Tree navigation and blob reading at a given commit."""

from typing import TYPE_CHECKING

from minigit.exceptions import BranchNotFoundError, PathNotFoundError, ValidationError
from minigit.repository._models import EntryKind, TreeEntry
from minigit.repository._store import is_directory_mode, is_gitlink_mode

if TYPE_CHECKING:
    from minigit.repository._store import RepositoryHandle


def normalize_tree_path(path: str | None) -> str:
    """Normalize a repository-relative path.

    Whitespace and leading/trailing ``/`` are removed; the root is ``""``.

    Examples:
        >>> normalize_tree_path(" /src/app/ ")
        'src/app'
        >>> normalize_tree_path("/")
        ''
    """
    if path is None:
        return ""
    return path.strip().strip("/")


def _join(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


def _sort_key(entry: TreeEntry) -> tuple[bool, str]:
    return (not entry.is_directory, entry.name.lower())


class TreeNavigator:
    """Lists and inspects tree entries of a commit."""

    def _root_tree(self, handle: "RepositoryHandle", commit_id: str) -> str:
        commit = handle.peel_to_commit(commit_id)
        if commit is None:
            msg = f"Commit not found: {commit_id}"
            raise BranchNotFoundError(msg, ref=commit_id)
        return commit.tree.decode("ascii")

    def _make_entry(
        self, handle: "RepositoryHandle", path: str, name: str, mode: int, object_id: str
    ) -> TreeEntry:
        if is_directory_mode(mode):
            return TreeEntry(name=name, path=path, kind=EntryKind.DIRECTORY)
        if is_gitlink_mode(mode):
            return TreeEntry(name=name, path=path, kind=EntryKind.FILE, size=0)
        return TreeEntry(
            name=name, path=path, kind=EntryKind.FILE, size=handle.blob_size(object_id)
        )

    def list_directory(
        self, handle: "RepositoryHandle", commit_id: str, relative_path: str | None = None
    ) -> list[TreeEntry]:
        """List the immediate children of a directory.

        Directories sort before files; names compare case-insensitively.

        Args:
            handle: The open repository.
            commit_id: Commit whose tree is listed.
            relative_path: Directory path; empty or None for the root.

        Returns:
            The sorted entries.

        Raises:
            PathNotFoundError: If the path is missing or is not a directory.
        """
        path = normalize_tree_path(relative_path)
        tree_id = self._root_tree(handle, commit_id)

        if path:
            mode, tree_id = handle.lookup_path(tree_id, path)
            if not is_directory_mode(mode):
                msg = f"Not a directory: {path}"
                raise PathNotFoundError(msg, path=path)

        entries = [
            self._make_entry(handle, _join(path, name), name, mode, object_id)
            for name, mode, object_id in handle.iter_tree(tree_id)
        ]
        return sorted(entries, key=_sort_key)

    def locate(
        self, handle: "RepositoryHandle", commit_id: str, relative_path: str | None
    ) -> tuple[str, int, str]:
        """Find a non-root path, returning ``(normalized path, mode, object id)``.

        Raises:
            ValidationError: If the path is empty or names the root.
            PathNotFoundError: If the path does not exist.
        """
        path = normalize_tree_path(relative_path)
        if not path:
            msg = "File path must not be empty"
            raise ValidationError(msg, field="path")
        mode, object_id = handle.lookup_path(self._root_tree(handle, commit_id), path)
        return path, mode, object_id

    def get_entry_info(
        self, handle: "RepositoryHandle", commit_id: str, relative_path: str | None
    ) -> TreeEntry:
        """Describe a single file or directory."""
        path, mode, object_id = self.locate(handle, commit_id, relative_path)
        return self._make_entry(handle, path, path.rsplit("/", 1)[-1], mode, object_id)


class BlobReader:
    """Reads file contents at a commit."""

    def __init__(self, navigator: TreeNavigator | None = None) -> None:
        self._navigator = navigator if navigator is not None else TreeNavigator()

    def read_file(
        self, handle: "RepositoryHandle", commit_id: str, relative_path: str | None
    ) -> bytes:
        """Return the raw bytes of a file.

        Raises:
            ValidationError: If the path is empty or is a directory.
            PathNotFoundError: If the path is missing or is a submodule.
        """
        path, mode, object_id = self._navigator.locate(handle, commit_id, relative_path)
        if is_directory_mode(mode):
            msg = f"{path} is a directory, not a file"
            raise ValidationError(msg, field="path")
        if is_gitlink_mode(mode):
            msg = f"{path} is a submodule; its content lives in another repository"
            raise PathNotFoundError(msg, path=path)
        return handle.read_blob(object_id)

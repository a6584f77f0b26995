"""Scoped access to bare repositories in the object store.

This module wraps dulwich so that the rest of minigit deals in hex string ids,
``/``-separated paths and minigit exceptions. A RepositoryHandle is owned by
the call that opened it and must be closed, normally through ``with``.
"""

import re
import shutil
import stat
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Final, Self, cast

from dulwich.errors import NotGitRepository, NotTreeError, ObjectFormatException
from dulwich.file import FileLocked
from dulwich.object_store import tree_lookup_path
from dulwich.objects import Blob, Commit, Tag, Tree
from dulwich.refs import SYMREF, check_ref_format
from dulwich.repo import Repo

from minigit.exceptions import (
    BranchExistsError,
    PathNotFoundError,
    RepositoryIOError,
    RepositoryNotFoundError,
)
from minigit.repository._models import CommitInfo
from minigit.utils import LOCAL_BRANCH_PREFIX, decode_bytes

if TYPE_CHECKING:
    from types import TracebackType

HEAD: Final = "HEAD"

# Submodule entries point at commits in another repository.
GITLINK_MODE: Final = 0o160000

_HEX_ID = re.compile(r"[0-9a-fA-F]{40}")
_SHORT_HEX_ID = re.compile(r"[0-9a-fA-F]{4,39}")
_MAX_PEEL_DEPTH: Final = 16


def _parse_identity(identity: bytes) -> tuple[str, str]:
    """Split a ``Name <email>`` identity line."""
    text = decode_bytes(identity)
    if "<" in text and text.endswith(">"):
        name, _, email = text.partition("<")
        return name.strip(), email[:-1].strip()
    return text.strip(), ""


def _commit_to_info(commit: Commit) -> CommitInfo:
    author_name, author_email = _parse_identity(cast("bytes", commit.author))
    # dulwich offsets are seconds east of UTC
    tz = timezone(timedelta(seconds=cast("int", commit.author_timezone)))
    authored_at = datetime.fromtimestamp(cast("int", commit.author_time), tz=tz)
    return CommitInfo(
        id=commit.id.decode("ascii"),
        tree_id=cast("bytes", commit.tree).decode("ascii"),
        author_name=author_name,
        author_email=author_email,
        authored_at=authored_at,
        message=decode_bytes(cast("bytes", commit.message)),
        parent_ids=tuple(p.decode("ascii") for p in cast("list[bytes]", commit.parents)),
    )


class RepositoryHandle:
    """An open bare repository.

    Attributes:
        path: Filesystem path of the repository.
    """

    __slots__: Final = ("_path", "_repo")
    _path: Path
    _repo: Repo

    def __init__(self, path: Path, repo: Repo) -> None:
        self._path = path
        self._repo = repo

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: "type[BaseException] | None",
        exc_val: BaseException | None,
        exc_tb: "TracebackType | None",
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release file handles held by the underlying dulwich Repo."""
        self._repo.close()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def repo(self) -> Repo:
        """The wrapped dulwich Repo, for the protocol handlers."""
        return self._repo

    # =========================================================================
    # Refs
    # =========================================================================

    def symbolic_head(self) -> str | None:
        """Return the ref HEAD points at, or None if HEAD is detached or absent."""
        try:
            raw = self._repo.refs.read_ref(HEAD.encode())
        except OSError as e:
            msg = f"Failed to read HEAD in {self._path}"
            raise RepositoryIOError(msg, path=self._path) from e
        if raw is None or not raw.startswith(SYMREF):
            return None
        return decode_bytes(raw[len(SYMREF) :].strip())

    def head_object_id(self) -> str | None:
        """Return the object id HEAD resolves to, or None when unborn."""
        return self.resolve_ref(HEAD)

    def resolve_ref(self, name: str) -> str | None:
        """Resolve a ref name or full object id to an object id.

        Symbolic refs are followed. Names that are not well-formed refs are
        never looked up on disk.

        Args:
            name: ``HEAD``, a full ref name, or a 40-character hex id.

        Returns:
            The hex object id, or None if nothing matches.
        """
        if _HEX_ID.fullmatch(name):
            object_id = name.lower().encode("ascii")
            return name.lower() if object_id in self._repo.object_store else None

        ref = name.encode("utf-8")
        if ref != HEAD.encode() and not check_ref_format(ref):
            return None
        try:
            sha = self._repo.refs[ref]
        except KeyError:
            return None
        except OSError as e:
            msg = f"Failed to read ref {name} in {self._path}"
            raise RepositoryIOError(msg, path=self._path) from e
        if sha is None or not _HEX_ID.fullmatch(sha.decode("ascii", errors="replace")):
            return None
        return sha.decode("ascii")

    def resolve_short_id(self, prefix: str) -> str | None:
        """Expand an abbreviated object id.

        Args:
            prefix: At least four hex digits.

        Returns:
            The full hex id, or None when nothing or more than one object
            matches.
        """
        if not _SHORT_HEX_ID.fullmatch(prefix):
            return None
        wanted = prefix.lower().encode("ascii")
        matches: set[bytes] = set()
        try:
            for sha in self._repo.object_store:
                if sha.startswith(wanted):
                    matches.add(sha)
                    if len(matches) > 1:
                        return None
        except OSError as e:
            msg = f"Failed to scan objects in {self._path}"
            raise RepositoryIOError(msg, path=self._path) from e
        return matches.pop().decode("ascii") if matches else None

    def list_head_refs(self) -> list[tuple[str, str]]:
        """List branch heads as ``(full ref name, object id)``.

        Dangling symbolic heads are skipped. The result is sorted by ref name.
        """
        try:
            heads = self._repo.refs.as_dict(LOCAL_BRANCH_PREFIX.encode())
        except OSError as e:
            msg = f"Failed to list branches in {self._path}"
            raise RepositoryIOError(msg, path=self._path) from e
        return sorted(
            (LOCAL_BRANCH_PREFIX + decode_bytes(name), sha.decode("ascii"))
            for name, sha in heads.items()
        )

    def create_ref(self, name: str, object_id: str) -> bool:
        """Create a ref only if it does not exist yet.

        Args:
            name: Full ref name.
            object_id: Hex id the new ref points at.

        Returns:
            True when created.

        Raises:
            BranchExistsError: If the ref already exists, is being created by
                another writer, or clashes with an existing ref's path.
            RepositoryIOError: If the ref cannot be written.
        """
        try:
            created = self._repo.refs.add_if_new(
                name.encode("utf-8"), object_id.encode("ascii")
            )
        except FileLocked as e:
            msg = f"Branch already exists: {name}"
            raise BranchExistsError(msg) from e
        except (NotADirectoryError, IsADirectoryError) as e:
            # refs/heads/a and refs/heads/a/b cannot both exist
            msg = f"Branch {name} conflicts with an existing branch"
            raise BranchExistsError(msg) from e
        except OSError as e:
            msg = f"Failed to create ref {name} in {self._path}"
            raise RepositoryIOError(msg, path=self._path) from e
        if not created:
            msg = f"Branch already exists: {name}"
            raise BranchExistsError(msg)
        return True

    # =========================================================================
    # Objects
    # =========================================================================

    def peel_to_commit(self, object_id: str) -> Commit | None:
        """Follow annotated tags until a commit is reached.

        Returns:
            The commit, or None when the id names some other object.
        """
        try:
            obj = self._repo[object_id.encode("ascii")]
            for _ in range(_MAX_PEEL_DEPTH):
                if not isinstance(obj, Tag):
                    break
                _, target = cast("tuple[type, bytes]", obj.object)
                obj = self._repo[target]
        except KeyError:
            return None
        except ObjectFormatException as e:
            msg = f"Corrupt object {object_id} in {self._path}"
            raise RepositoryIOError(msg, path=self._path) from e
        return obj if isinstance(obj, Commit) else None

    def parse_commit(self, object_id: str) -> CommitInfo | None:
        commit = self.peel_to_commit(object_id)
        return _commit_to_info(commit) if commit is not None else None

    def iter_commits(self, object_id: str, max_count: int) -> Iterator[CommitInfo]:
        """Walk history from a commit, newest first."""
        walker = self._repo.get_walker(
            include=[object_id.encode("ascii")], max_entries=max_count
        )
        for entry in walker:
            yield _commit_to_info(entry.commit)

    def lookup_path(self, tree_id: str, path: str) -> tuple[int, str]:
        """Locate ``path`` beneath a tree.

        Args:
            tree_id: Id of the root tree.
            path: Non-empty, normalized ``/``-separated path.

        Returns:
            ``(mode, object id)`` of the entry.

        Raises:
            PathNotFoundError: If the path does not exist.
        """
        try:
            mode, sha = tree_lookup_path(
                self._repo.__getitem__, tree_id.encode("ascii"), path.encode("utf-8")
            )
        except (KeyError, NotTreeError) as e:
            msg = f"Path not found: {path}"
            raise PathNotFoundError(msg, path=path) from e
        return mode, sha.decode("ascii")

    def iter_tree(self, tree_id: str) -> Iterator[tuple[str, int, str]]:
        """Yield ``(name, mode, object id)`` for the immediate children of a tree."""
        tree = self._repo[tree_id.encode("ascii")]
        if not isinstance(tree, Tree):
            msg = f"Object {tree_id} is not a tree"
            raise PathNotFoundError(msg)
        for entry in tree.iteritems():
            yield decode_bytes(entry.path), entry.mode, entry.sha.decode("ascii")

    def blob_size(self, object_id: str) -> int:
        _, data = self._repo.object_store.get_raw(object_id.encode("ascii"))
        return len(data)

    def read_blob(self, object_id: str) -> bytes:
        blob = self._repo[object_id.encode("ascii")]
        if not isinstance(blob, Blob):
            msg = f"Object {object_id} is not a blob"
            raise PathNotFoundError(msg)
        return blob.as_raw_string()


def is_directory_mode(mode: int) -> bool:
    return stat.S_ISDIR(mode)


def is_gitlink_mode(mode: int) -> bool:
    return mode & 0o170000 == GITLINK_MODE


def open_repository(path: Path) -> RepositoryHandle:
    """Open the bare repository at ``path``.

    Raises:
        RepositoryNotFoundError: If ``path`` is not a git repository.
        RepositoryIOError: If the repository cannot be read.
    """
    try:
        repo = Repo(str(path))
    except NotGitRepository as e:
        msg = f"Repository not found: {path.name}"
        raise RepositoryNotFoundError(msg, name=path.name) from e
    except OSError as e:
        msg = f"Failed to open repository {path}"
        raise RepositoryIOError(msg, path=path) from e
    return RepositoryHandle(path, repo)


def init_bare_repository(path: Path, default_branch: str) -> None:
    """Initialize a bare repository in the existing, empty directory ``path``.

    HEAD is made a symbolic ref to ``refs/heads/<default_branch>``. On failure
    the directory is removed.

    Raises:
        RepositoryIOError: If initialization fails.
    """
    head_target = (LOCAL_BRANCH_PREFIX + default_branch).encode("utf-8")
    try:
        repo = Repo.init_bare(str(path))
        try:
            repo.refs.set_symbolic_ref(HEAD.encode(), head_target)
        finally:
            repo.close()
    except OSError as e:
        shutil.rmtree(path, ignore_errors=True)
        msg = f"Failed to initialize repository {path}"
        raise RepositoryIOError(msg, path=path) from e

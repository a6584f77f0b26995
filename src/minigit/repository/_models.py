# ruff: noqa: TC003  # datetime needed at runtime for dataclass fields
"""minigit repository models.

This module defines the value types returned by the repository layer.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from minigit.utils import format_bytes, strip_refs_heads

DIRECTORY_SIZE_PLACEHOLDER = "-"
SHORT_ID_LENGTH = 8


@dataclass(frozen=True, slots=True)
class RepositoryIdentity:
    """A repository name as supplied and in canonical form.

    Attributes:
        raw: The name exactly as received.
        canonical: Trimmed name ending in ``.git``; a single path segment.
    """

    raw: str
    canonical: str


@dataclass(frozen=True, slots=True)
class Ref:
    """A named pointer into the object store.

    Attributes:
        name: Full ref name, e.g. ``refs/heads/main``.
        object_id: Hex object id, or None before resolution.
    """

    name: str
    object_id: str | None = None

    @property
    def short_name(self) -> str:
        """Branch name without the ``refs/heads/`` prefix."""
        return strip_refs_heads(self.name)


@dataclass(frozen=True, slots=True)
class CommitInfo:
    """Information about a single commit.

    Attributes:
        id: Full 40-character commit id.
        tree_id: Id of the commit's root tree.
        author_name: Author name from the commit.
        author_email: Author email from the commit.
        authored_at: Author timestamp in the author's timezone.
        message: Complete commit message.
        parent_ids: Parent commit ids (empty for a root commit).
    """

    id: str
    tree_id: str
    author_name: str
    author_email: str
    authored_at: datetime
    message: str
    parent_ids: tuple[str, ...] = ()

    @property
    def short_id(self) -> str:
        """Abbreviated commit id."""
        return self.id[:SHORT_ID_LENGTH]

    @property
    def short_message(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0].strip()


class EntryKind(StrEnum):
    """Kind of a tree entry."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """An immediate child of a tree.

    Attributes:
        name: Final path component.
        path: Path relative to the root tree, ``/``-separated.
        kind: File or directory.
        size: Blob size in bytes; None for directories.
    """

    name: str
    path: str
    kind: EntryKind
    size: int | None = None

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def size_formatted(self) -> str:
        """Human-readable size, or ``-`` for directories."""
        if self.size is None:
            return DIRECTORY_SIZE_PLACEHOLDER
        return format_bytes(self.size)


@dataclass(frozen=True, slots=True)
class BranchSummary:
    """A branch head with its latest commit.

    Attributes:
        name: Full ref name.
        is_default: Whether the default-branch heuristic picked this branch.
        last_commit_id: Id of the commit the branch points at.
        last_commit_message: First line of that commit's message.
        last_commit_date: Author timestamp of that commit.
    """

    name: str
    is_default: bool
    last_commit_id: str
    last_commit_message: str
    last_commit_date: datetime

    @property
    def short_name(self) -> str:
        return strip_refs_heads(self.name)

    @property
    def last_commit_short_id(self) -> str:
        return self.last_commit_id[:SHORT_ID_LENGTH]

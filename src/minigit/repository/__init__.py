"""Repository storage, resolution and browsing.

This package turns untrusted repository names into on-disk bare repositories
and answers questions about their branches, trees and files.
"""

from ._branches import DEFAULT_PREFERRED_BRANCHES, BranchResolver
from ._models import (
    DIRECTORY_SIZE_PLACEHOLDER,
    BranchSummary,
    CommitInfo,
    EntryKind,
    Ref,
    RepositoryIdentity,
    TreeEntry,
)
from ._names import (
    CANONICAL_SUFFIX,
    display_name,
    is_valid_repository_name,
    normalize_repository_name,
)
from ._service import DEFAULT_LOG_LIMIT, GitRepositoryService
from ._storage import RepositoryStorage
from ._store import RepositoryHandle, init_bare_repository, open_repository
from ._tree import BlobReader, TreeNavigator, normalize_tree_path

__all__ = [
    "CANONICAL_SUFFIX",
    "DEFAULT_LOG_LIMIT",
    "DEFAULT_PREFERRED_BRANCHES",
    "DIRECTORY_SIZE_PLACEHOLDER",
    "BlobReader",
    "BranchResolver",
    "BranchSummary",
    "CommitInfo",
    "EntryKind",
    "GitRepositoryService",
    "Ref",
    "RepositoryHandle",
    "RepositoryIdentity",
    "RepositoryStorage",
    "TreeEntry",
    "TreeNavigator",
    "display_name",
    "init_bare_repository",
    "is_valid_repository_name",
    "normalize_repository_name",
    "normalize_tree_path",
    "open_repository",
]

"""Path-based repository operations.

Each public method opens the repository at the given path, does its work and
closes it again before returning, so no handle outlives a call.
"""

from typing import TYPE_CHECKING, Final

from dulwich.refs import check_ref_format

from minigit.exceptions import EmptyRepositoryError, InternalError, ValidationError
from minigit.repository._branches import BranchResolver
from minigit.repository._models import BranchSummary, CommitInfo, Ref, TreeEntry
from minigit.repository._store import open_repository
from minigit.repository._tree import BlobReader, TreeNavigator
from minigit.utils import LOCAL_BRANCH_PREFIX

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from minigit.config import StorageConfiguration

DEFAULT_LOG_LIMIT: Final = 20


class GitRepositoryService:
    """Browsing and branch operations on bare repositories.

    Attributes:
        branches: The resolver used for refs and the default branch.
    """

    __slots__: Final = ("_blobs", "_branches", "_logger", "_navigator")

    def __init__(
        self,
        branches: BranchResolver | None = None,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._branches = branches if branches is not None else BranchResolver()
        self._navigator = TreeNavigator()
        self._blobs = BlobReader(self._navigator)
        self._logger = logger

    @classmethod
    def from_config(
        cls,
        config: "StorageConfiguration",
        logger: "FilteringBoundLogger | None" = None,
    ) -> "GitRepositoryService":
        return cls(BranchResolver(config.preferred_branches), logger=logger)

    @property
    def branches(self) -> BranchResolver:
        return self._branches

    def is_empty_repository(self, path: "Path") -> bool:
        """Return True when no branch head resolves to an object."""
        with open_repository(path) as handle:
            return not handle.list_head_refs()

    def get_default_branch(self, path: "Path") -> str | None:
        """Return the full ref name of the default branch, or None."""
        with open_repository(path) as handle:
            return self._branches.default_branch(handle)

    def get_branches(self, path: "Path") -> list[BranchSummary]:
        """List branches sorted by ref name, marking the default one."""
        with open_repository(path) as handle:
            default = self._branches.default_branch(handle)
            summaries: list[BranchSummary] = []
            for name, object_id in handle.list_head_refs():
                commit = handle.parse_commit(object_id)
                if commit is None:
                    continue
                summaries.append(
                    BranchSummary(
                        name=name,
                        is_default=name == default,
                        last_commit_id=commit.id,
                        last_commit_message=commit.short_message,
                        last_commit_date=commit.authored_at,
                    )
                )
            return summaries

    def get_commit_log(
        self,
        path: "Path",
        branch: str | None = None,
        max_count: int = DEFAULT_LOG_LIMIT,
    ) -> list[CommitInfo]:
        """Return up to ``max_count`` commits reachable from a branch, newest first.

        Args:
            path: Repository path.
            branch: Branch, ref or commit id; None for the default branch.
            max_count: Maximum number of commits, at least 1.

        Returns:
            The commits, or an empty list for a repository without branches.

        Raises:
            ValidationError: If ``max_count`` is less than 1.
            BranchNotFoundError: If the branch cannot be resolved.
        """
        if max_count < 1:
            msg = f"max_count must be at least 1, got {max_count}"
            raise ValidationError(msg, field="max_count")

        with open_repository(path) as handle:
            try:
                commit_id = self._branches.resolve(handle, branch)
            except EmptyRepositoryError:
                return []
            return list(handle.iter_commits(commit_id, max_count))

    def get_file_list(
        self,
        path: "Path",
        branch: str | None = None,
        dir_path: str | None = None,
    ) -> list[TreeEntry]:
        """List a directory at a branch; empty for a repository without branches."""
        with open_repository(path) as handle:
            try:
                commit_id = self._branches.resolve(handle, branch)
            except EmptyRepositoryError:
                return []
            return self._navigator.list_directory(handle, commit_id, dir_path)

    def get_file_info(self, path: "Path", branch: str | None, file_path: str) -> TreeEntry:
        """Describe a file or directory at a branch.

        Raises:
            ValidationError: If ``file_path`` is empty or names the root.
            EmptyRepositoryError: If the repository has no branches.
            BranchNotFoundError: If the branch cannot be resolved.
            PathNotFoundError: If the path does not exist.
        """
        with open_repository(path) as handle:
            commit_id = self._branches.resolve(handle, branch)
            return self._navigator.get_entry_info(handle, commit_id, file_path)

    def get_file_content(self, path: "Path", branch: str | None, file_path: str) -> bytes:
        """Return the bytes of a file at a branch.

        Raises:
            ValidationError: If ``file_path`` is empty or is a directory.
            EmptyRepositoryError: If the repository has no branches.
            BranchNotFoundError: If the branch cannot be resolved.
            PathNotFoundError: If the path does not exist.
        """
        with open_repository(path) as handle:
            commit_id = self._branches.resolve(handle, branch)
            return self._blobs.read_file(handle, commit_id, file_path)

    def get_file_detail(
        self, path: "Path", branch: str | None, file_path: str
    ) -> tuple[TreeEntry, bytes | None]:
        """Describe a path and read its bytes from a single commit.

        The branch is resolved once, so the entry and the content always come
        from the same commit even while the branch moves.

        Returns:
            The entry, and the file bytes or None for a directory.

        Raises:
            ValidationError: If ``file_path`` is empty or names the root.
            EmptyRepositoryError: If the repository has no branches.
            BranchNotFoundError: If the branch cannot be resolved.
            PathNotFoundError: If the path does not exist.
        """
        with open_repository(path) as handle:
            commit_id = self._branches.resolve(handle, branch)
            entry = self._navigator.get_entry_info(handle, commit_id, file_path)
            if entry.is_directory:
                return entry, None
            return entry, self._blobs.read_file(handle, commit_id, file_path)

    def create_branch(
        self,
        path: "Path",
        from_branch: str | None,
        new_branch: str,
    ) -> Ref:
        """Create a branch pointing at the head of another branch.

        Args:
            path: Repository path.
            from_branch: Source branch; None for the default branch.
            new_branch: Short name of the branch to create.

        Returns:
            The created ref.

        Raises:
            ValidationError: If ``new_branch`` is not a valid branch name.
            EmptyRepositoryError: If the repository has no branches.
            BranchNotFoundError: If the source branch cannot be resolved.
            BranchExistsError: If ``new_branch`` already exists.
        """
        short = new_branch.strip() if new_branch else ""
        if short.startswith(LOCAL_BRANCH_PREFIX):
            short = short[len(LOCAL_BRANCH_PREFIX) :]
        ref_name = LOCAL_BRANCH_PREFIX + short
        if not short or not check_ref_format(ref_name.encode("utf-8")):
            msg = f"Invalid branch name: {new_branch!r}"
            raise ValidationError(msg, field="new_branch")

        with open_repository(path) as handle:
            source_id = self._branches.resolve(handle, from_branch)
            handle.create_ref(ref_name, source_id)
            created = handle.resolve_ref(ref_name)

        if created is None:
            msg = f"Branch {ref_name} vanished after creation"
            raise InternalError(msg)

        if self._logger is not None:
            self._logger.info(
                "branch_created",
                repository=path.name,
                branch=ref_name,
                source=from_branch,
                object_id=created,
            )
        return Ref(name=ref_name, object_id=created)

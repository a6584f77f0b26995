"""minigit exceptions."""

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from pathlib import Path


class MinigitError(Exception):
    """Base exception for minigit errors."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(MinigitError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded, parsed or validated."""

    def __init__(
        self,
        message: str,
        *,
        path: "Path | None" = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


# =============================================================================
# Repository Exceptions
# =============================================================================


class RepositoryError(MinigitError):
    """Base exception for repository operations.

    Attributes:
        code: Stable error code surfaced to API clients.
        client_facing: Whether the message may be shown to the caller verbatim.
    """

    code: ClassVar[str] = "INTERNAL_ERROR"
    client_facing: ClassVar[bool] = False


class ValidationError(RepositoryError, ValueError):
    """Raised for bad names, bad or empty paths and file/directory mismatches.

    Attributes:
        field: The input field that failed validation, if known.
    """

    code: ClassVar[str] = "INVALID_ARGUMENT"
    client_facing: ClassVar[bool] = True

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Initialize with error message and the offending field.

        Args:
            message: Human-readable error message.
            field: The input field that failed validation.
        """
        super().__init__(message)
        self.field: str | None = field


class NotFoundError(RepositoryError, LookupError):
    """Base exception for absent repositories, branches and paths."""

    code: ClassVar[str] = "NOT_FOUND"
    client_facing: ClassVar[bool] = True


class RepositoryNotFoundError(NotFoundError):
    """Raised when a repository does not exist under the storage root.

    Attributes:
        name: The repository name that was looked up.
    """

    code: ClassVar[str] = "REPO_NOT_FOUND"

    def __init__(self, message: str, *, name: str | None = None) -> None:
        """Initialize with error message and repository name.

        Args:
            message: Human-readable error message.
            name: The repository name that was looked up.
        """
        super().__init__(message)
        self.name: str | None = name


class BranchNotFoundError(NotFoundError):
    """Raised when a branch or ref cannot be resolved to a commit.

    Attributes:
        ref: The requested ref, or None when the default branch was wanted.
    """

    code: ClassVar[str] = "BRANCH_NOT_FOUND"

    def __init__(self, message: str, *, ref: str | None = None) -> None:
        """Initialize with error message and the requested ref.

        Args:
            message: Human-readable error message.
            ref: The requested ref, or None for the default branch.
        """
        super().__init__(message)
        self.ref: str | None = ref


class EmptyRepositoryError(NotFoundError):
    """Raised when a repository has no branch heads at all."""

    code: ClassVar[str] = "REPOSITORY_EMPTY"


class PathNotFoundError(NotFoundError):
    """Raised when a path does not exist in a commit's tree.

    Attributes:
        path: The repository-relative path that was looked up.
    """

    code: ClassVar[str] = "PATH_NOT_FOUND"

    def __init__(self, message: str, *, path: str | None = None) -> None:
        """Initialize with error message and the missing path.

        Args:
            message: Human-readable error message.
            path: The repository-relative path that was looked up.
        """
        super().__init__(message)
        self.path: str | None = path


class ConflictError(RepositoryError):
    """Base exception for create-if-absent operations that lost."""

    code: ClassVar[str] = "CONFLICT"
    client_facing: ClassVar[bool] = True


class RepositoryExistsError(ConflictError):
    """Raised when creating a repository whose directory already exists.

    Attributes:
        path: The path that already exists.
    """

    code: ClassVar[str] = "REPO_ALREADY_EXISTS"

    def __init__(self, message: str, *, path: "Path | None" = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The path that already exists.
        """
        super().__init__(message)
        self.path: Path | None = path


class BranchExistsError(ConflictError):
    """Raised when creating a branch that already exists."""

    code: ClassVar[str] = "BRANCH_ALREADY_EXISTS"


class RepositoryIOError(RepositoryError):
    """Raised when the underlying object store fails.

    Attributes:
        path: The repository path involved, if known.
    """

    code: ClassVar[str] = "IO_ERROR"

    def __init__(self, message: str, *, path: "Path | None" = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The repository path involved.
        """
        super().__init__(message)
        self.path: Path | None = path


class InternalError(RepositoryError):
    """Raised for unexpected failures."""

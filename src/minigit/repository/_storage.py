"""Repository storage: name-to-path resolution and repository lifecycle.

Every bare repository lives in its own directory directly under the storage
root, named by the repository's canonical name (``<name>.git``).
"""

from pathlib import Path
from typing import TYPE_CHECKING, Final

from minigit.exceptions import RepositoryExistsError, RepositoryIOError, ValidationError
from minigit.repository._models import RepositoryIdentity
from minigit.repository._names import is_valid_repository_name, normalize_repository_name
from minigit.repository._store import init_bare_repository

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from minigit.config import StorageConfiguration


class RepositoryStorage:
    """Maps repository names to directories and creates repositories.

    Attributes:
        root: The storage root directory.
        default_branch: Branch HEAD points at in new repositories.
    """

    __slots__: Final = ("_default_branch", "_logger", "_root")

    def __init__(
        self,
        root: Path,
        *,
        default_branch: str = "main",
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._root = root
        self._default_branch = default_branch
        self._logger = logger

    @classmethod
    def from_config(
        cls,
        config: "StorageConfiguration",
        logger: "FilteringBoundLogger | None" = None,
    ) -> "RepositoryStorage":
        return cls(
            Path(config.dir),
            default_branch=config.default_branch,
            logger=logger,
        )

    @property
    def root(self) -> Path:
        return self._root

    @property
    def default_branch(self) -> str:
        return self._default_branch

    # =========================================================================
    # Names
    # =========================================================================

    def is_valid_repository_name(self, name: str | None) -> bool:
        return is_valid_repository_name(name)

    def normalize_repository_name(self, name: str) -> str:
        return normalize_repository_name(name)

    def identify(self, name: str | None) -> RepositoryIdentity:
        """Validate a name and pair it with its canonical form.

        Raises:
            ValidationError: If the name is not acceptable.
        """
        if name is None or not is_valid_repository_name(name):
            msg = f"Invalid repository name: {name!r}"
            raise ValidationError(msg, field="name")
        return RepositoryIdentity(raw=name, canonical=normalize_repository_name(name))

    # =========================================================================
    # Paths
    # =========================================================================

    def resolve_path(self, canonical: str) -> Path:
        """Return the directory of a canonical repository name.

        Raises:
            ValidationError: If ``canonical`` is not a valid canonical name.
        """
        if not is_valid_repository_name(canonical) or (
            normalize_repository_name(canonical) != canonical
        ):
            msg = f"Invalid repository name: {canonical!r}"
            raise ValidationError(msg, field="name")
        return self._root / canonical

    def get_repository_path(self, name: str) -> Path:
        """Return the directory for a repository name, normalizing it first."""
        return self.resolve_path(self.identify(name).canonical)

    def ensure_root(self) -> Path:
        """Create the storage root if it is missing.

        Raises:
            RepositoryIOError: If the directory cannot be created.
        """
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Failed to create storage directory {self._root}"
            raise RepositoryIOError(msg, path=self._root) from e
        return self._root

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def create_repository(self, name: str) -> Path:
        """Create an empty bare repository.

        Args:
            name: Repository name, with or without the ``.git`` suffix.

        Returns:
            Path of the new repository.

        Raises:
            ValidationError: If the name is not acceptable.
            RepositoryExistsError: If the repository already exists.
            RepositoryIOError: If the repository cannot be initialized.
        """
        path = self.get_repository_path(name)
        self.ensure_root()

        try:
            path.mkdir()
        except FileExistsError as e:
            msg = f"Repository already exists: {path.name}"
            raise RepositoryExistsError(msg, path=path) from e
        except OSError as e:
            msg = f"Failed to create repository directory {path}"
            raise RepositoryIOError(msg, path=path) from e

        init_bare_repository(path, self._default_branch)

        if self._logger is not None:
            self._logger.info(
                "repository_created",
                repository=path.name,
                path=str(path),
                default_branch=self._default_branch,
            )
        return path

    def repository_exists(self, name: str) -> bool:
        """Check whether a repository directory exists.

        Invalid names never exist.
        """
        if not is_valid_repository_name(name):
            return False
        return self.get_repository_path(name).is_dir()

    def list_repositories(self) -> list[str]:
        """List canonical names of the repositories under the root, sorted."""
        try:
            children = list(self._root.iterdir())
        except FileNotFoundError:
            return []
        except OSError as e:
            msg = f"Failed to list storage directory {self._root}"
            raise RepositoryIOError(msg, path=self._root) from e

        return sorted(
            child.name
            for child in children
            if child.is_dir()
            and is_valid_repository_name(child.name)
            and normalize_repository_name(child.name) == child.name
        )

    def repository_size(self, name: str) -> int:
        """Total size in bytes of the regular files in a repository directory."""
        path = self.get_repository_path(name)
        try:
            return sum(p.stat().st_size for p in path.rglob("*") if p.is_file())
        except OSError as e:
            msg = f"Failed to measure repository {path}"
            raise RepositoryIOError(msg, path=path) from e

"""Branch and ref resolution, including the default-branch heuristic."""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Final

from minigit.exceptions import BranchNotFoundError, EmptyRepositoryError
from minigit.utils import LOCAL_BRANCH_PREFIX

if TYPE_CHECKING:
    from minigit.repository._store import RepositoryHandle

DEFAULT_PREFERRED_BRANCHES: Final = ("main", "master")
TAG_PREFIX: Final = "refs/tags/"


class BranchResolver:
    """Resolves requested refs, or the default branch, to commit ids.

    The default branch of a repository is chosen as follows:

    1. The branch HEAD points at, when HEAD is symbolic and the branch exists.
    2. Otherwise, when HEAD resolves to a commit, the first preferred branch
       name whose head is at that commit.
    3. Otherwise the first branch head, by ref name, at HEAD's commit.
    4. Otherwise the first preferred branch name that exists at all.

    Attributes:
        preferred_branches: Short branch names, in order of preference.
    """

    __slots__: Final = ("_preferred",)

    def __init__(self, preferred_branches: Sequence[str] = DEFAULT_PREFERRED_BRANCHES) -> None:
        self._preferred = tuple(preferred_branches)

    @property
    def preferred_branches(self) -> tuple[str, ...]:
        return self._preferred

    def default_branch(self, handle: "RepositoryHandle") -> str | None:
        """Return the full ref name of the default branch, or None."""
        return self._default_branch(handle, dict(handle.list_head_refs()))

    def _default_branch(
        self, handle: "RepositoryHandle", heads: dict[str, str]
    ) -> str | None:
        target = handle.symbolic_head()
        if target is not None and target in heads:
            return target

        head_id = handle.head_object_id()
        if head_id is not None:
            for short in self._preferred:
                ref = LOCAL_BRANCH_PREFIX + short
                if heads.get(ref) == head_id:
                    return ref
            for ref in sorted(heads):
                if heads[ref] == head_id:
                    return ref

        for short in self._preferred:
            ref = LOCAL_BRANCH_PREFIX + short
            if ref in heads:
                return ref
        return None

    def resolve(self, handle: "RepositoryHandle", requested_ref: str | None = None) -> str:
        """Resolve a ref to a commit id.

        Args:
            handle: The open repository.
            requested_ref: A full ref, branch name, tag name, or full or
                abbreviated commit id, tried in that order. None or blank
                selects the default branch.

        Returns:
            The hex id of the commit, with annotated tags peeled.

        Raises:
            EmptyRepositoryError: If the repository has no branches.
            BranchNotFoundError: If the ref, or a default branch, cannot be found.
        """
        heads = dict(handle.list_head_refs())

        if requested_ref is None or not requested_ref.strip():
            ref = self._default_branch(handle, heads)
            if ref is None:
                if not heads:
                    msg = f"Repository {handle.path.name} has no branches"
                    raise EmptyRepositoryError(msg)
                msg = f"No default branch found in {handle.path.name}"
                raise BranchNotFoundError(msg)
            return self._peel(handle, heads[ref], ref)

        requested = requested_ref.strip()
        object_id = handle.resolve_ref(requested)
        if object_id is None and not requested.startswith("refs/"):
            object_id = handle.resolve_ref(LOCAL_BRANCH_PREFIX + requested)
            if object_id is None:
                object_id = handle.resolve_ref(TAG_PREFIX + requested)
            if object_id is None:
                object_id = handle.resolve_short_id(requested)

        if object_id is None:
            if not heads:
                msg = f"Repository {handle.path.name} has no branches"
                raise EmptyRepositoryError(msg)
            msg = f"Branch not found: {requested}"
            raise BranchNotFoundError(msg, ref=requested)
        return self._peel(handle, object_id, requested)

    def _peel(self, handle: "RepositoryHandle", object_id: str, ref: str) -> str:
        commit = handle.peel_to_commit(object_id)
        if commit is None:
            msg = f"Ref {ref} does not point at a commit"
            raise BranchNotFoundError(msg, ref=ref)
        return commit.id.decode("ascii")

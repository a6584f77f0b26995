"""Shared test fixtures for minigit tests."""

import threading
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from itertools import count
from pathlib import Path

import pytest
import structlog
from dulwich.objects import Blob, Commit, Tag, Tree
from dulwich.repo import Repo
from structlog.typing import FilteringBoundLogger

from minigit.repository import RepositoryStorage

AUTHOR = b"Test User <test@example.com>"
BASE_TIMESTAMP = 1_700_000_000

DIRECTORY_MODE = 0o040000
FILE_MODE = 0o100644
GITLINK_MODE = 0o160000

type CommitFiles = Callable[..., str]


def _write_tree(repo: Repo, node: Mapping[str, object]) -> bytes:
    tree = Tree()
    for name, value in node.items():
        if isinstance(value, dict):
            tree.add(name.encode(), DIRECTORY_MODE, _write_tree(repo, value))
        elif isinstance(value, tuple):
            mode, object_id = value
            tree.add(name.encode(), mode, object_id)
        else:
            assert isinstance(value, bytes)
            blob = Blob.from_string(value)
            repo.object_store.add_object(blob)
            tree.add(name.encode(), FILE_MODE, blob.id)
    repo.object_store.add_object(tree)
    return tree.id


def build_tree(
    repo: Repo,
    files: Mapping[str, bytes],
    submodules: Mapping[str, bytes] | None = None,
) -> bytes:
    """Write nested trees for ``/``-separated paths and return the root tree id.

    ``submodules`` maps paths to the commit ids their gitlink entries point at.
    """
    root: dict[str, object] = {}
    entries: list[tuple[str, object]] = list(files.items())
    entries.extend((path, (GITLINK_MODE, sha)) for path, sha in (submodules or {}).items())
    for path, content in entries:
        *parents, leaf = path.split("/")
        node = root
        for part in parents:
            child = node.setdefault(part, {})
            assert isinstance(child, dict)
            node = child
        node[leaf] = content
    return _write_tree(repo, root)


@pytest.fixture
def storage(tmp_path: Path) -> RepositoryStorage:
    """Repository storage rooted in a temporary directory."""
    return RepositoryStorage(tmp_path / "repos", default_branch="main")


@pytest.fixture
def repo_path(storage: RepositoryStorage) -> Path:
    """An empty bare repository named ``demo.git`` with HEAD -> refs/heads/main."""
    return storage.create_repository("demo")


@pytest.fixture
def commit_files() -> CommitFiles:
    """Return a function that commits a full file set onto a branch.

    The function takes the repository path and a mapping of paths to contents
    and returns the new commit id. The branch's current head becomes the
    parent. Commit times increase by one second per call.
    """
    timestamps = count(BASE_TIMESTAMP)

    def _commit(
        path: Path,
        files: Mapping[str, bytes],
        *,
        branch: str = "main",
        message: str = "Commit",
        timezone_offset: int = 0,
        submodules: Mapping[str, bytes] | None = None,
    ) -> str:
        ref = f"refs/heads/{branch}".encode()
        with Repo(str(path)) as repo:
            commit = Commit()
            commit.tree = build_tree(repo, files, submodules)
            try:
                commit.parents = [repo.refs[ref]]
            except KeyError:
                commit.parents = []
            commit.author = commit.committer = AUTHOR
            commit.author_time = commit.commit_time = next(timestamps)
            commit.author_timezone = commit.commit_timezone = timezone_offset
            commit.encoding = b"UTF-8"
            commit.message = message.encode()
            repo.object_store.add_object(commit)
            repo.refs[ref] = commit.id
            return commit.id.decode("ascii")

    return _commit


@pytest.fixture
def tag_commit() -> Callable[[Path, str, str], str]:
    """Return a function that creates an annotated tag for a commit."""

    def _tag(path: Path, name: str, commit_id: str) -> str:
        with Repo(str(path)) as repo:
            tag = Tag()
            tag.tagger = AUTHOR
            tag.name = name.encode()
            tag.message = b"Release\n"
            tag.tag_time = BASE_TIMESTAMP
            tag.tag_timezone = 0
            tag.object = (Commit, commit_id.encode("ascii"))
            repo.object_store.add_object(tag)
            repo.refs[f"refs/tags/{name}".encode()] = tag.id
            return tag.id.decode("ascii")

    return _tag


@pytest.fixture
def set_head() -> Callable[[Path, str], None]:
    """Return a function that points HEAD at a ref (symbolic) or a commit id (detached)."""

    def _set(path: Path, target: str) -> None:
        content = f"ref: {target}\n" if target.startswith("refs/") else f"{target}\n"
        (path / "HEAD").write_text(content)

    return _set


type LoggedEvents = list[dict[str, object]]
type CaptureLogger = Callable[[], tuple[FilteringBoundLogger, LoggedEvents]]


@pytest.fixture
def capture_logger() -> CaptureLogger:
    """Return a factory for a structlog logger that records events in a list."""

    def _make() -> tuple[FilteringBoundLogger, LoggedEvents]:
        events: LoggedEvents = []

        def _record(_logger: object, method_name: str, event_dict: dict[str, object]) -> str:
            events.append({"level": method_name, **event_dict})
            raise structlog.DropEvent

        logger = structlog.wrap_logger(
            structlog.PrintLogger(),
            processors=[_record],
            wrapper_class=structlog.make_filtering_bound_logger(0),
            context_class=dict,
        )
        return logger, events

    return _make


type RunConcurrently = Callable[[Callable[[], object], int], list[object]]


@pytest.fixture
def run_concurrently() -> RunConcurrently:
    """Return a helper that calls a function from several threads at once.

    The threads are released together from a barrier. Each outcome is either
    the function's return value or the exception it raised.
    """

    def _run(func: Callable[[], object], workers: int) -> list[object]:
        barrier = threading.Barrier(workers)

        def _call() -> object:
            barrier.wait(timeout=10)
            try:
                return func()
            except Exception as e:  # noqa: BLE001
                return e

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(_call) for _ in range(workers)]
            return [future.result() for future in futures]

    return _run

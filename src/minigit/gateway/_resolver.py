"""Repository resolution for Git protocol requests."""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Final

from minigit.exceptions import RepositoryIOError, RepositoryNotFoundError
from minigit.gateway._audit import build_event
from minigit.gateway._operations import classify_operation
from minigit.repository import open_repository

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from minigit.gateway._audit import AccessAuditor
    from minigit.gateway._operations import RequestSignals
    from minigit.repository import RepositoryHandle, RepositoryStorage


class RepositoryResolver:
    """Opens the repository a protocol request names and audits the attempt."""

    __slots__: Final = ("_auditor", "_logger", "_storage")

    def __init__(
        self,
        storage: "RepositoryStorage",
        auditor: "AccessAuditor",
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._storage = storage
        self._auditor = auditor
        self._logger = logger

    @contextmanager
    def resolve_repository_for_request(
        self, signals: "RequestSignals", raw_name: str | None
    ) -> Iterator["RepositoryHandle"]:
        """Open a repository for the duration of a ``with`` block.

        Exactly one audit event is recorded per call. It reports success once
        the repository is open, even if the caller's block later fails.

        Args:
            signals: Transport-independent view of the request.
            raw_name: Repository name taken from the URL.

        Yields:
            The open repository; closed when the block exits.

        Raises:
            RepositoryNotFoundError: If the name is invalid or no such
                repository exists.
        """
        started = time.monotonic()
        operation = classify_operation(signals)
        repository = raw_name or ""
        handle: RepositoryHandle | None = None

        try:
            if raw_name is None or not self._storage.is_valid_repository_name(raw_name):
                msg = f"Repository not found: {raw_name!r}"
                raise RepositoryNotFoundError(msg, name=raw_name)

            canonical = self._storage.normalize_repository_name(raw_name)
            repository = canonical
            if not self._storage.repository_exists(canonical):
                msg = f"Repository not found: {canonical}"
                raise RepositoryNotFoundError(msg, name=canonical)

            try:
                handle = open_repository(self._storage.resolve_path(canonical))
            except RepositoryIOError as e:
                msg = f"Repository not found: {canonical}"
                raise RepositoryNotFoundError(msg, name=canonical) from e
            if self._logger is not None:
                self._logger.debug(
                    "repository_opened", repository=canonical, operation=str(operation)
                )
        finally:
            self._auditor.record(
                build_event(
                    signals,
                    repository=repository,
                    operation=operation,
                    success=handle is not None,
                    duration_ms=(time.monotonic() - started) * 1000,
                )
            )

        with handle:
            yield handle

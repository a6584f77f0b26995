"""Classification of Git smart-HTTP requests by protocol operation."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

UPLOAD_PACK: Final = "git-upload-pack"
RECEIVE_PACK: Final = "git-receive-pack"


class GitOperation(StrEnum):
    """Protocol operation a request belongs to."""

    FETCH = "fetch"
    PUSH = "push"
    INFO_REFS = "info_refs"


@dataclass(frozen=True, slots=True)
class RequestSignals:
    """The parts of an incoming request that classification and auditing need.

    Attributes:
        target_descriptor: Request path.
        query_markers: Raw query string.
        headers: Request headers with lower-cased names.
        remote_address: Socket peer address, if known.
        principal: Authenticated user name supplied upstream, if any.
    """

    target_descriptor: str
    query_markers: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    remote_address: str | None = None
    principal: str | None = None

    @classmethod
    def build(
        cls,
        target_descriptor: str,
        query_markers: str = "",
        headers: Mapping[str, str] | None = None,
        remote_address: str | None = None,
        principal: str | None = None,
    ) -> "RequestSignals":
        """Create signals, lower-casing header names."""
        normalized = {k.lower(): v for k, v in (headers or {}).items()}
        return cls(
            target_descriptor=target_descriptor,
            query_markers=query_markers,
            headers=normalized,
            remote_address=remote_address,
            principal=principal,
        )

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


def _operation_in(text: str) -> GitOperation | None:
    if UPLOAD_PACK in text:
        return GitOperation.FETCH
    if RECEIVE_PACK in text:
        return GitOperation.PUSH
    return None


def classify_operation(signals: RequestSignals) -> GitOperation:
    """Determine the protocol operation of a request.

    The query string is checked before the path, so
    ``/info/refs?service=git-receive-pack`` is a push.
    """
    return (
        _operation_in(signals.query_markers)
        or _operation_in(signals.target_descriptor)
        or GitOperation.INFO_REFS
    )

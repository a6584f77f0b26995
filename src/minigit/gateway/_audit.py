"""Structured audit trail of Git protocol access."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from minigit.gateway._operations import GitOperation, RequestSignals

ANONYMOUS: Final = "anonymous"
UNKNOWN_ADDRESS: Final = "unknown"


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """A single protocol access.

    Attributes:
        timestamp: When the access finished, in UTC.
        repository: Repository name as requested.
        operation: Protocol operation.
        user: Principal, or ``anonymous``.
        client_address: Best-known client address.
        user_agent: Client user agent, if sent.
        success: Whether the repository was opened.
        duration_ms: Elapsed milliseconds, never negative.
    """

    timestamp: datetime
    repository: str
    operation: "GitOperation"
    user: str
    client_address: str
    user_agent: str | None
    success: bool
    duration_ms: int


def client_address(signals: "RequestSignals") -> str:
    """Return the client address, preferring proxy headers.

    The first ``X-Forwarded-For`` entry wins, then ``X-Real-IP``, then the
    socket address.
    """
    forwarded = signals.header("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",", 1)[0].strip()
        if first:
            return first

    real_ip = signals.header("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return signals.remote_address or UNKNOWN_ADDRESS


def user_name(signals: "RequestSignals") -> str:
    if signals.principal and signals.principal.strip():
        return signals.principal.strip()
    return ANONYMOUS


def build_event(
    signals: "RequestSignals",
    *,
    repository: str,
    operation: "GitOperation",
    success: bool,
    duration_ms: float,
) -> AuditEvent:
    return AuditEvent(
        timestamp=datetime.now(UTC),
        repository=repository,
        operation=operation,
        user=user_name(signals),
        client_address=client_address(signals),
        user_agent=signals.header("user-agent"),
        success=success,
        duration_ms=max(0, round(duration_ms)),
    )


class AccessAuditor:
    """Writes audit events to the access logger."""

    __slots__: Final = ("_logger",)

    def __init__(self, logger: "FilteringBoundLogger") -> None:
        self._logger = logger

    def record(self, event: AuditEvent) -> None:
        """Log an event at info level, or warning when it failed."""
        log = self._logger.info if event.success else self._logger.warning
        log(
            "git_access",
            repository=event.repository,
            operation=str(event.operation),
            user=event.user,
            client_address=event.client_address,
            user_agent=event.user_agent,
            success=event.success,
            duration_ms=event.duration_ms,
            accessed_at=event.timestamp.isoformat(),
        )

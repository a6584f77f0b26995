"""Unit tests for access auditing."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from minigit.gateway import (
    ANONYMOUS,
    UNKNOWN_ADDRESS,
    AccessAuditor,
    AuditEvent,
    GitOperation,
    RequestSignals,
    build_event,
    client_address,
)

if TYPE_CHECKING:
    from tests.conftest import CaptureLogger


class TestClientAddress:
    def test_first_forwarded_for_entry(self) -> None:
        signals = RequestSignals.build(
            "/",
            headers={"X-Forwarded-For": " 10.0.0.1 , 10.0.0.2", "X-Real-IP": "10.0.0.9"},
            remote_address="127.0.0.1",
        )

        assert client_address(signals) == "10.0.0.1"

    def test_real_ip_when_not_forwarded(self) -> None:
        signals = RequestSignals.build(
            "/", headers={"X-Real-IP": " 10.0.0.9 "}, remote_address="127.0.0.1"
        )

        assert client_address(signals) == "10.0.0.9"

    def test_blank_headers_fall_through(self) -> None:
        signals = RequestSignals.build(
            "/", headers={"X-Forwarded-For": " ", "X-Real-IP": ""}, remote_address="127.0.0.1"
        )

        assert client_address(signals) == "127.0.0.1"

    def test_unknown_without_any_source(self) -> None:
        assert client_address(RequestSignals.build("/")) == UNKNOWN_ADDRESS


class TestBuildEvent:
    def test_anonymous_without_principal(self) -> None:
        event = build_event(
            RequestSignals.build("/", principal="  "),
            repository="demo.git",
            operation=GitOperation.FETCH,
            success=True,
            duration_ms=1.4,
        )

        assert event.user == ANONYMOUS
        assert event.duration_ms == 1

    def test_principal_and_user_agent(self) -> None:
        event = build_event(
            RequestSignals.build("/", headers={"User-Agent": "git/2.43"}, principal="alice"),
            repository="demo.git",
            operation=GitOperation.PUSH,
            success=False,
            duration_ms=12.6,
        )

        assert event.user == "alice"
        assert event.user_agent == "git/2.43"
        assert event.duration_ms == 13
        assert not event.success
        assert event.timestamp.tzinfo is UTC

    def test_negative_duration_is_clamped(self) -> None:
        event = build_event(
            RequestSignals.build("/"),
            repository="demo.git",
            operation=GitOperation.INFO_REFS,
            success=True,
            duration_ms=-5,
        )

        assert event.duration_ms == 0


class TestAccessAuditor:
    @pytest.mark.parametrize(("success", "level"), [(True, "info"), (False, "warning")])
    def test_records_at_level(
        self, capture_logger: "CaptureLogger", success: bool, level: str
    ) -> None:
        logger, events = capture_logger()
        event = AuditEvent(
            timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC),
            repository="demo.git",
            operation=GitOperation.FETCH,
            user=ANONYMOUS,
            client_address="10.0.0.1",
            user_agent=None,
            success=success,
            duration_ms=7,
        )

        AccessAuditor(logger).record(event)

        assert events == [
            {
                "level": level,
                "event": "git_access",
                "repository": "demo.git",
                "operation": "fetch",
                "user": "anonymous",
                "client_address": "10.0.0.1",
                "user_agent": None,
                "success": success,
                "duration_ms": 7,
                "accessed_at": "2024-01-02T03:04:05+00:00",
            }
        ]

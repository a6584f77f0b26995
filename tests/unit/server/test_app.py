"""Unit tests for application wiring and error rendering."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from minigit.config import Config, ServerConfiguration, StorageConfiguration
from minigit.exceptions import (
    BranchExistsError,
    EmptyRepositoryError,
    InternalError,
    PathNotFoundError,
    RepositoryError,
    RepositoryIOError,
    ValidationError,
)
from minigit.server import ServerContext, create_app, status_for

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

    from tests.conftest import CaptureLogger


class TestStatusFor:
    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (ValidationError("bad"), 400),
            (PathNotFoundError("missing"), 404),
            (EmptyRepositoryError("empty"), 404),
            (BranchExistsError("exists"), 409),
            (RepositoryIOError("io"), 500),
            (InternalError("boom"), 500),
        ],
    )
    def test_maps_error(self, error: RepositoryError, status: int) -> None:
        assert status_for(error) == status


class TestErrorHandling:
    def test_io_error_is_reported_generically(
        self, tmp_path: Path, capture_logger: "CaptureLogger", mocker: "MockerFixture"
    ) -> None:
        logger, events = capture_logger()
        config = Config(storage=StorageConfiguration(dir=str(tmp_path / "repos")))
        context = ServerContext.from_config(config, logger=logger, access_logger=logger)
        context.storage.create_repository("demo")
        mocker.patch.object(
            type(context.service),
            "get_branches",
            side_effect=RepositoryIOError("disk on fire at /secret/path"),
        )

        with TestClient(create_app(context=context)) as client:
            response = client.get("/api/repos/demo/branches")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "IO_ERROR"
        assert body["message"] == "Internal server error"
        failures = [e for e in events if e["event"] == "request_failed"]
        assert len(failures) == 1
        assert failures[0]["level"] == "error"

    def test_client_error_is_logged_as_rejection(
        self, tmp_path: Path, capture_logger: "CaptureLogger"
    ) -> None:
        logger, events = capture_logger()
        config = Config(storage=StorageConfiguration(dir=str(tmp_path / "repos")))
        context = ServerContext.from_config(config, logger=logger, access_logger=logger)

        with TestClient(create_app(context=context)) as client:
            client.get("/api/repos/missing")

        (rejected,) = [e for e in events if e["event"] == "request_rejected"]
        assert rejected["error"] == "REPO_NOT_FOUND"
        assert rejected["path"] == "/api/repos/missing"


class TestGitPrefix:
    def test_custom_prefix(self, tmp_path: Path, capture_logger: "CaptureLogger") -> None:
        logger, _ = capture_logger()
        config = Config(
            storage=StorageConfiguration(dir=str(tmp_path / "repos")),
            server=ServerConfiguration(git_prefix="/scm"),
        )
        context = ServerContext.from_config(config, logger=logger, access_logger=logger)
        context.storage.create_repository("demo")

        with TestClient(create_app(context=context)) as client:
            listed = client.get("/api/repos").json()
            response = client.get("/scm/demo.git/info/refs", params={"service": "git-upload-pack"})

        assert listed[0]["clone_url"] == "http://testserver/scm/demo.git"
        assert response.status_code == 200

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from minigit.config import Config, StorageConfiguration
from minigit.server import ServerContext, create_app

if TYPE_CHECKING:
    from tests.conftest import CaptureLogger, LoggedEvents


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


@dataclass(frozen=True, slots=True)
class ServerEnv:
    """A running test application and what it logged."""

    client: TestClient
    context: ServerContext
    events: "LoggedEvents"
    access_events: "LoggedEvents"

    @property
    def storage_dir(self) -> Path:
        return self.context.storage.root


@pytest.fixture
def server(tmp_path: Path, capture_logger: "CaptureLogger") -> Iterator[ServerEnv]:
    """Application over an empty storage root, with recording loggers."""
    logger, events = capture_logger()
    access_logger, access_events = capture_logger()
    config = Config(storage=StorageConfiguration(dir=str(tmp_path / "repos")))
    context = ServerContext.from_config(config, logger=logger, access_logger=access_logger)

    with TestClient(create_app(context=context)) as client:
        yield ServerEnv(
            client=client, context=context, events=events, access_events=access_events
        )

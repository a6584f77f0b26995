"""Integration tests for the HTML pages."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tests.integration.conftest import ServerEnv


class TestIndex:
    def test_empty(self, server: "ServerEnv") -> None:
        response = server.client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "No repositories yet." in response.text

    def test_lists_clone_urls(self, server: "ServerEnv") -> None:
        server.context.storage.create_repository("demo")

        response = server.client.get("/")

        assert "<strong>demo</strong>" in response.text
        assert "git clone http://testserver/git/demo.git" in response.text

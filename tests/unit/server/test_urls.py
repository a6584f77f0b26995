"""Unit tests for public URL and header construction."""

import pytest

from minigit.server._urls import build_base_url, build_clone_url, content_disposition


def base_url(headers: dict[str, str], *, scheme: str = "http", port: int | None = 8080) -> str:
    return build_base_url(headers, scheme=scheme, server_host="10.0.0.5", server_port=port)


class TestBuildBaseUrl:
    def test_server_address_without_headers(self) -> None:
        assert base_url({}) == "http://10.0.0.5:8080"

    def test_default_port_is_omitted(self) -> None:
        assert base_url({}, port=80) == "http://10.0.0.5"
        assert base_url({}, scheme="https", port=443) == "https://10.0.0.5"

    @pytest.mark.parametrize(
        ("host", "expected"),
        [
            ("git.example.com", "http://git.example.com"),
            ("git.example.com:8443", "http://git.example.com:8443"),
            ("git.example.com:80", "http://git.example.com"),
            ("[::1]:8080", "http://[::1]:8080"),
            ("[2001:db8::1]", "http://[2001:db8::1]"),
        ],
    )
    def test_host_header(self, host: str, expected: str) -> None:
        assert base_url({"host": host}) == expected

    def test_forwarded_headers_take_precedence(self) -> None:
        headers = {
            "host": "internal:8080",
            "x-forwarded-proto": "HTTPS",
            "x-forwarded-host": "git.example.com, proxy.local",
        }

        assert base_url(headers) == "https://git.example.com"

    def test_forwarded_port(self) -> None:
        headers = {"x-forwarded-host": "git.example.com", "x-forwarded-port": "8443"}

        assert base_url(headers) == "http://git.example.com:8443"

    def test_invalid_forwarded_port_is_ignored(self) -> None:
        headers = {"host": "git.example.com:9000", "x-forwarded-port": "abc"}

        assert base_url(headers) == "http://git.example.com:9000"

    def test_bare_ipv6_server_host_is_bracketed(self) -> None:
        url = build_base_url({}, scheme="http", server_host="::1", server_port=8080)

        assert url == "http://[::1]:8080"


class TestBuildCloneUrl:
    @pytest.mark.parametrize("prefix", ["/git", "/git/"])
    def test_joins_prefix_and_name(self, prefix: str) -> None:
        url = build_clone_url("https://git.example.com", prefix, "demo.git")

        assert url == "https://git.example.com/git/demo.git"


class TestContentDisposition:
    def test_inline_ascii(self) -> None:
        assert content_disposition("a.txt", attachment=False) == (
            "inline; filename=\"a.txt\"; filename*=UTF-8''a.txt"
        )

    def test_attachment_non_ascii(self) -> None:
        value = content_disposition("résumé.pdf", attachment=True)

        assert value.startswith('attachment; filename="r?sum?.pdf"')
        assert value.endswith("filename*=UTF-8''r%C3%A9sum%C3%A9.pdf")

    def test_quotes_are_escaped(self) -> None:
        value = content_disposition('say "hi".txt', attachment=True)

        assert 'filename="say \\"hi\\".txt"' in value

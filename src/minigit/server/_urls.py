"""Public URL construction behind reverse proxies, and download headers."""

from collections.abc import Mapping
from typing import Final
from urllib.parse import quote

_DEFAULT_PORTS: Final = {"http": 80, "https": 443}


def _first(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        return None
    value = value.split(",", 1)[0].strip()
    return value or None


def _split_host(host: str) -> tuple[str, int | None]:
    if host.startswith("["):
        end = host.find("]")
        if end < 0:
            return host, None
        hostname = host[1:end]
        rest = host[end + 1 :]
        if rest.startswith(":") and rest[1:].isdigit():
            return hostname, int(rest[1:])
        return hostname, None

    hostname, colon, port = host.rpartition(":")
    if colon and hostname and port.isdigit() and ":" not in hostname:
        return hostname, int(port)
    return host, None


def build_base_url(
    headers: Mapping[str, str],
    *,
    scheme: str,
    server_host: str,
    server_port: int | None,
) -> str:
    """Build ``scheme://host[:port]`` as seen by the client.

    ``X-Forwarded-Proto``, ``X-Forwarded-Host`` and ``X-Forwarded-Port`` take
    precedence over ``Host`` and the server's own address. IPv6 hosts are
    bracketed and default ports are omitted.

    Args:
        headers: Request headers with lower-cased names.
        scheme: Scheme the request arrived with.
        server_host: Host the server received the request on.
        server_port: Port the server received the request on.

    Returns:
        The base URL without a trailing slash.
    """
    scheme = (_first(headers, "x-forwarded-proto") or scheme).lower()
    header_host = _first(headers, "x-forwarded-host") or headers.get("host")
    hostname, port = _split_host((header_host or server_host).strip())

    forwarded_port = _first(headers, "x-forwarded-port")
    if forwarded_port is not None and forwarded_port.isdigit() and int(forwarded_port) > 0:
        port = int(forwarded_port)
    # A Host header without a port means the scheme default.
    if port is None and not header_host:
        port = server_port

    if ":" in hostname and not hostname.startswith("["):
        hostname = f"[{hostname}]"

    base = f"{scheme}://{hostname}"
    if port and port != _DEFAULT_PORTS.get(scheme):
        base += f":{port}"
    return base


def build_clone_url(base_url: str, git_prefix: str, canonical_name: str) -> str:
    return f"{base_url}{git_prefix.rstrip('/')}/{canonical_name}"


def content_disposition(file_name: str, *, attachment: bool) -> str:
    """Build an RFC 6266 ``Content-Disposition`` value.

    Examples:
        >>> content_disposition("my file.txt", attachment=True)
        'attachment; filename="my file.txt"; filename*=UTF-8\\'\\'my%20file.txt'
    """
    kind = "attachment" if attachment else "inline"
    escaped = file_name.replace("\\", "\\\\").replace('"', '\\"')
    # Header values must be latin-1; the ASCII fallback drops anything else.
    fallback = escaped.encode("ascii", errors="replace").decode("ascii")
    return f"{kind}; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name, safe='')}"

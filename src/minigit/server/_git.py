"""Git smart-HTTP endpoints.

Protocol work is delegated to the dulwich upload-pack and receive-pack
handlers in stateless-RPC mode. Each request resolves its repository through
the RepositoryResolver, which records one access audit event.
"""

import gzip
from io import BytesIO
from typing import TYPE_CHECKING, Final

from dulwich.protocol import ReceivableProtocol
from dulwich.server import Backend, ReceivePackHandler, UploadPackHandler
from fastapi import APIRouter, HTTPException, Request, Response
from starlette.concurrency import run_in_threadpool

from minigit.gateway import RECEIVE_PACK, UPLOAD_PACK, RequestSignals

from ._context import Context

if TYPE_CHECKING:
    from dulwich.repo import Repo

    from ._context import ServerContext

PRINCIPAL_HEADER: Final = "x-remote-user"

_HANDLERS: Final = {
    UPLOAD_PACK: UploadPackHandler,
    RECEIVE_PACK: ReceivePackHandler,
}

_NO_CACHE: Final = {
    "Cache-Control": "no-cache, max-age=0, must-revalidate",
    "Expires": "Fri, 01 Jan 1980 00:00:00 GMT",
    "Pragma": "no-cache",
}


class HandleBackend(Backend):
    """Serves exactly one already-open repository."""

    def __init__(self, repo: "Repo") -> None:
        self._repo = repo

    def open_repository(self, path: object) -> "Repo":  # noqa: ARG002
        return self._repo


def signals_from_request(request: Request) -> RequestSignals:
    headers = {k.lower(): v for k, v in request.headers.items()}
    return RequestSignals.build(
        target_descriptor=request.url.path,
        query_markers=request.url.query,
        headers=headers,
        remote_address=request.client.host if request.client else None,
        principal=headers.get(PRINCIPAL_HEADER),
    )


def _decode_body(request: Request, body: bytes) -> bytes:
    if request.headers.get("content-encoding", "").lower() == "gzip":
        try:
            return gzip.decompress(body)
        except (OSError, EOFError) as e:
            raise HTTPException(status_code=400, detail="Malformed gzip body") from e
    return body


def _advertise_refs(
    context: "ServerContext", signals: RequestSignals, name: str, service: str
) -> bytes:
    out = BytesIO()
    with context.resolver.resolve_repository_for_request(signals, name) as handle:
        proto = ReceivableProtocol(BytesIO().read, out.write)
        handler = _HANDLERS[service](
            HandleBackend(handle.repo),
            ["/"],
            proto,
            stateless_rpc=True,
            advertise_refs=True,
        )
        handler.proto.write_pkt_line(b"# service=" + service.encode("ascii") + b"\n")
        handler.proto.write_pkt_line(None)
        handler.handle()
    return out.getvalue()


def _run_service(
    context: "ServerContext", signals: RequestSignals, name: str, service: str, body: bytes
) -> bytes:
    out = BytesIO()
    with context.resolver.resolve_repository_for_request(signals, name) as handle:
        proto = ReceivableProtocol(BytesIO(body).read, out.write)
        handler = _HANDLERS[service](
            HandleBackend(handle.repo), ["/"], proto, stateless_rpc=True
        )
        handler.handle()
    context.logger.debug(
        "git_service_completed",
        repository=name,
        service=service,
        request_bytes=len(body),
        response_bytes=out.tell(),
    )
    return out.getvalue()


def create_git_router(prefix: str) -> APIRouter:
    """Build the smart-HTTP router mounted at ``prefix``."""
    router = APIRouter(prefix=prefix.rstrip("/"), tags=["git"], include_in_schema=False)

    @router.get("/{name}/info/refs")
    async def git_info_refs(
        name: str, request: Request, context: Context, service: str | None = None
    ) -> Response:
        """Ref advertisement, the first request of every clone, fetch and push."""
        if service not in _HANDLERS:
            raise HTTPException(status_code=400, detail="Smart HTTP protocol required")
        content = await run_in_threadpool(
            _advertise_refs, context, signals_from_request(request), name, service
        )
        return Response(
            content=content,
            media_type=f"application/x-{service}-advertisement",
            headers=_NO_CACHE,
        )

    async def _serve(name: str, request: Request, context: "ServerContext", service: str) -> Response:
        body = _decode_body(request, await request.body())
        content = await run_in_threadpool(
            _run_service, context, signals_from_request(request), name, service, body
        )
        return Response(
            content=content,
            media_type=f"application/x-{service}-result",
            headers=_NO_CACHE,
        )

    @router.post("/{name}/git-upload-pack")
    async def git_upload_pack(name: str, request: Request, context: Context) -> Response:
        """Fetch and clone."""
        return await _serve(name, request, context, UPLOAD_PACK)

    @router.post("/{name}/git-receive-pack")
    async def git_receive_pack(name: str, request: Request, context: Context) -> Response:
        """Push."""
        return await _serve(name, request, context, RECEIVE_PACK)

    return router

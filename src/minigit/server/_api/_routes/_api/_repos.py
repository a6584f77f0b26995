from typing import Annotated

from fastapi import APIRouter, Query, Request

from minigit.server._context import Context
from minigit.server._schemas import (
    BranchResponse,
    CreateBranchRequest,
    RefResponse,
    RepositoryDetailResponse,
    RepositoryResponse,
)
from minigit.utils import format_bytes

router = APIRouter(prefix="/repos", tags=["repositories"])


@router.get("")
def list_repositories(request: Request, context: Context) -> list[RepositoryResponse]:
    return [
        RepositoryResponse(name=name, clone_url=context.clone_url(request, name))
        for name in context.storage.list_repositories()
    ]


@router.post("", status_code=201)
def create_repository(
    request: Request, context: Context, name: Annotated[str, Query()]
) -> RepositoryResponse:
    path = context.storage.create_repository(name)
    return RepositoryResponse(name=path.name, clone_url=context.clone_url(request, path.name))


@router.get("/{name}")
def get_repository(name: str, request: Request, context: Context) -> RepositoryDetailResponse:
    path = context.repository_path(name)
    size = context.storage.repository_size(path.name)
    return RepositoryDetailResponse(
        name=path.name,
        clone_url=context.clone_url(request, path.name),
        size=size,
        size_formatted=format_bytes(size),
        empty=context.service.is_empty_repository(path),
        default_branch=context.service.get_default_branch(path),
    )


@router.get("/{name}/branches")
def list_branches(name: str, context: Context) -> list[BranchResponse]:
    path = context.repository_path(name)
    return [BranchResponse.from_summary(b) for b in context.service.get_branches(path)]


@router.post("/{name}/branches", status_code=201)
def create_branch(name: str, body: CreateBranchRequest, context: Context) -> RefResponse:
    path = context.repository_path(name)
    ref = context.service.create_branch(path, body.from_branch, body.new_branch)
    return RefResponse.from_ref(ref)

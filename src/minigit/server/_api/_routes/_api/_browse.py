"""Read-only browsing of commits, trees and file contents."""

from typing import Annotated

from fastapi import APIRouter, Query, Response

from minigit.repository import DEFAULT_LOG_LIMIT
from minigit.server._context import Context
from minigit.server._schemas import (
    CommitResponse,
    EntryDetailResponse,
    PreviewResponse,
    TreeEntryResponse,
)
from minigit.server._urls import content_disposition

router = APIRouter(prefix="/repos/{name}", tags=["browse"])


@router.get("/commits")
def list_commits(
    name: str,
    context: Context,
    branch: str | None = None,
    max_count: Annotated[int, Query(ge=1, le=1000)] = DEFAULT_LOG_LIMIT,
) -> list[CommitResponse]:
    path = context.repository_path(name)
    commits = context.service.get_commit_log(path, branch, max_count)
    return [CommitResponse.from_commit(c) for c in commits]


@router.get("/tree")
def list_tree(
    name: str,
    context: Context,
    branch: str | None = None,
    path: str | None = None,
) -> list[TreeEntryResponse]:
    repo_path = context.repository_path(name)
    entries = context.service.get_file_list(repo_path, branch, path)
    return [TreeEntryResponse.from_entry(e) for e in entries]


@router.get("/entry")
def get_entry(
    name: str,
    context: Context,
    path: str,
    branch: str | None = None,
) -> EntryDetailResponse:
    """Describe a path, with a preview decision when it is a file."""
    repo_path = context.repository_path(name)
    entry, content = context.service.get_file_detail(repo_path, branch, path)
    if content is None:
        return EntryDetailResponse(entry=TreeEntryResponse.from_entry(entry))

    decision = context.classifier.decide_preview(entry.name, content)
    return EntryDetailResponse(
        entry=TreeEntryResponse.from_entry(entry),
        preview=PreviewResponse.from_decision(decision),
    )


@router.get("/raw")
def get_raw(
    name: str,
    context: Context,
    path: str,
    branch: str | None = None,
    download: bool = False,
) -> Response:
    """Serve file bytes with their classified content type."""
    repo_path = context.repository_path(name)
    content = context.service.get_file_content(repo_path, branch, path)
    file_name = path.strip().strip("/").rsplit("/", 1)[-1]
    sample = content[: context.classifier.config.max_sample_bytes]
    classification = context.classifier.classify(file_name, sample)
    return Response(
        content=content,
        media_type=classification.mime_type,
        headers={
            "Content-Disposition": content_disposition(file_name, attachment=download),
            "X-Content-Type-Options": "nosniff",
        },
    )

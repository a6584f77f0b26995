"""Response models of the JSON API."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from minigit.preview import PreviewDecision
    from minigit.repository import BranchSummary, CommitInfo, Ref, TreeEntry


class ErrorResponse(BaseModel):
    error: str
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class HealthResponse(BaseModel):
    status: str
    storage: str
    storage_accessible: bool
    repositories: int
    version: str


class RepositoryResponse(BaseModel):
    name: str
    clone_url: str


class RepositoryDetailResponse(BaseModel):
    name: str
    clone_url: str
    size: int
    size_formatted: str
    empty: bool
    default_branch: str | None


class BranchResponse(BaseModel):
    name: str
    short_name: str
    is_default: bool
    last_commit_id: str
    last_commit_short_id: str
    last_commit_message: str
    last_commit_date: datetime

    @classmethod
    def from_summary(cls, summary: "BranchSummary") -> Self:
        return cls(
            name=summary.name,
            short_name=summary.short_name,
            is_default=summary.is_default,
            last_commit_id=summary.last_commit_id,
            last_commit_short_id=summary.last_commit_short_id,
            last_commit_message=summary.last_commit_message,
            last_commit_date=summary.last_commit_date,
        )


class CreateBranchRequest(BaseModel):
    new_branch: str = Field(min_length=1)
    from_branch: str | None = None


class RefResponse(BaseModel):
    name: str
    short_name: str
    object_id: str | None

    @classmethod
    def from_ref(cls, ref: "Ref") -> Self:
        return cls(name=ref.name, short_name=ref.short_name, object_id=ref.object_id)


class CommitResponse(BaseModel):
    id: str
    short_id: str
    tree_id: str
    author_name: str
    author_email: str
    authored_at: datetime
    message: str
    short_message: str
    parent_ids: list[str]

    @classmethod
    def from_commit(cls, commit: "CommitInfo") -> Self:
        return cls(
            id=commit.id,
            short_id=commit.short_id,
            tree_id=commit.tree_id,
            author_name=commit.author_name,
            author_email=commit.author_email,
            authored_at=commit.authored_at,
            message=commit.message,
            short_message=commit.short_message,
            parent_ids=list(commit.parent_ids),
        )


class TreeEntryResponse(BaseModel):
    name: str
    path: str
    type: str
    size: int | None
    size_formatted: str

    @classmethod
    def from_entry(cls, entry: "TreeEntry") -> Self:
        return cls(
            name=entry.name,
            path=entry.path,
            type=str(entry.kind),
            size=entry.size,
            size_formatted=entry.size_formatted,
        )


class PreviewResponse(BaseModel):
    category: str
    mime_type: str
    highlight_language: str | None
    inline: bool
    too_large: bool
    binary_detected: bool

    @classmethod
    def from_decision(cls, decision: "PreviewDecision") -> Self:
        classification = decision.classification
        return cls(
            category=str(classification.category),
            mime_type=classification.mime_type,
            highlight_language=classification.highlight_language,
            inline=decision.inline,
            too_large=decision.too_large,
            binary_detected=decision.binary_detected,
        )


class EntryDetailResponse(BaseModel):
    entry: TreeEntryResponse
    preview: PreviewResponse | None = None

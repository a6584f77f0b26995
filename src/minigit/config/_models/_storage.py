"""Storage configuration model.

This module provides the StorageConfiguration Pydantic model for the
repository storage root and branch defaults.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class StorageConfiguration(BaseModel):
    """Repository storage configuration.

    Attributes:
        dir: Directory holding one bare repository per canonical name.
        default_branch: Branch HEAD points at in newly created repositories.
        preferred_branches: Branch names tried, in order, when guessing the
            default branch of a repository.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    dir: str = Field(
        default="./data/repos",
        description="Repository storage directory.",
    )
    default_branch: str = Field(
        default="main",
        min_length=1,
        description="Initial branch for new repositories.",
    )
    preferred_branches: tuple[str, ...] = Field(
        default=("main", "master"),
        description="Branch names preferred by the default-branch heuristic.",
    )

"""Logging configuration model.

This module provides the LoggingConfig Pydantic model for logging settings.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from minigit.config._models._common import LogFormat, LogLevel


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty writes to stderr).
        access_file: Path to the git access log (empty shares the main sink).
        max_bytes: Size at which a log file is rotated. Rotation applies to
            file sinks only and needs backup_count as well.
        backup_count: Number of rotated files kept per log file.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""
    access_file: str = ""
    max_bytes: int | None = Field(default=None, gt=0)
    backup_count: int | None = Field(default=None, gt=0)

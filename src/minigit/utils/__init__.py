"""Shared utilities: logger factories and formatting helpers."""

from ._format import LOCAL_BRANCH_PREFIX, decode_bytes, format_bytes, strip_refs_heads
from ._logging import (
    ACCESS_LOGGER_NAME,
    create_access_logger,
    create_logger,
    create_server_logger,
)

__all__ = [
    "ACCESS_LOGGER_NAME",
    "LOCAL_BRANCH_PREFIX",
    "create_access_logger",
    "create_logger",
    "create_server_logger",
    "decode_bytes",
    "format_bytes",
    "strip_refs_heads",
]

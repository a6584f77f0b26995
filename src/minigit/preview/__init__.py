"""File content classification for previews and downloads."""

from ._classifier import (
    OCTET_STREAM,
    Classification,
    ContentClassifier,
    PreviewCategory,
    PreviewDecision,
    extract_extension,
    guess_mime_type,
    is_likely_binary,
    is_likely_text,
)

__all__ = [
    "OCTET_STREAM",
    "Classification",
    "ContentClassifier",
    "PreviewCategory",
    "PreviewDecision",
    "extract_extension",
    "guess_mime_type",
    "is_likely_binary",
    "is_likely_text",
]

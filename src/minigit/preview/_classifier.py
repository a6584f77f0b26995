"""Content classification for safe previews.

Files are classified by extension first, then by a generic MIME lookup on the
name, and only then, when both say ``binary``, by a statistical look at the
bytes themselves.
"""

import mimetypes
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from minigit.config import PreviewConfiguration

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

OCTET_STREAM: Final = "application/octet-stream"

_TAB: Final = 0x09
_LF: Final = 0x0A
_CR: Final = 0x0D
_TEXT_WHITESPACE: Final = frozenset({_TAB, _LF, _CR})

_MAX_NUL_BYTES: Final = 3
_MIN_PRINTABLE_RATIO: Final = 0.7
_MAX_CONTROL_RATIO: Final = 0.1
_MAX_TOLERATED_NULS: Final = 2


class PreviewCategory(StrEnum):
    """How a file can be previewed."""

    MARKDOWN = "markdown"
    TEXT = "text"
    IMAGE = "image"
    PDF = "pdf"
    WORD = "word"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    BINARY = "binary"

    @property
    def is_text_like(self) -> bool:
        return self in (PreviewCategory.MARKDOWN, PreviewCategory.TEXT)


_OFFICE_MIME_TYPES: Final[dict[str, str]] = {
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}

_OFFICE_DEFAULTS: Final[dict[PreviewCategory, str]] = {
    PreviewCategory.WORD: "application/msword",
    PreviewCategory.SPREADSHEET: "application/vnd.ms-excel",
    PreviewCategory.PRESENTATION: "application/vnd.ms-powerpoint",
}


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of classifying a file.

    Attributes:
        category: Preview category.
        mime_type: Content type to serve the bytes with.
        highlight_language: Syntax-highlighter language, if known.
    """

    category: PreviewCategory
    mime_type: str
    highlight_language: str | None = None


@dataclass(frozen=True, slots=True)
class PreviewDecision:
    """Whether and how a file is shown inline.

    Attributes:
        classification: The file's classification.
        inline: True when the content may be rendered in the page.
        too_large: Text-like content exceeded the inline size limit.
        binary_detected: Text-like content contained binary data.
    """

    classification: Classification
    inline: bool
    too_large: bool = False
    binary_detected: bool = False


def extract_extension(file_name: str | None) -> str | None:
    """Return the lower-cased extension of a file name.

    Examples:
        >>> extract_extension("README.MD")
        'md'
        >>> extract_extension("Makefile") is None
        True
        >>> extract_extension("archive.") is None
        True
    """
    if not file_name:
        return None
    _, dot, extension = file_name.rpartition(".")
    if not dot or not extension:
        return None
    return extension.lower()


def guess_mime_type(file_name: str | None) -> str | None:
    """Look up a MIME type from a file name alone."""
    if not file_name:
        return None
    mime_type, _ = mimetypes.guess_type(file_name, strict=False)
    return mime_type


def is_likely_text(sample: bytes, max_bytes: int = 8192) -> bool:
    """Guess whether bytes are text.

    Only the first ``max_bytes`` bytes are inspected. Bytes ``0x20-0x7E``,
    tab, LF, CR and anything ``>= 0x80`` count as printable; other bytes below
    ``0x20`` (NUL included) count as control characters.

    Args:
        sample: The content to inspect.
        max_bytes: Maximum number of bytes to inspect.

    Returns:
        True if the content looks like text. Empty content is not text.
    """
    window = sample[:max_bytes]
    if not window:
        return False

    printable = 0
    control = 0
    nul_count = 0
    for b in window:
        if b == 0:
            nul_count += 1
            if nul_count > _MAX_NUL_BYTES:
                return False
        if 0x20 <= b <= 0x7E or b in _TEXT_WHITESPACE or b >= 0x80:  # noqa: PLR2004
            printable += 1
        else:
            control += 1

    length = len(window)
    return (
        printable / length > _MIN_PRINTABLE_RATIO
        and control / length < _MAX_CONTROL_RATIO
        and nul_count <= _MAX_TOLERATED_NULS
    )


def is_likely_binary(content: bytes, max_bytes: int = 4096) -> bool:
    """Check text-like content for embedded binary data.

    Any NUL byte, or control bytes outside ``0x09-0x0D`` making up more than
    an eighth of the inspected window, marks the content as binary.
    """
    window = content[:max_bytes]
    control = 0
    for b in window:
        if b == 0:
            return True
        if b < _TAB or _CR < b < 0x20:  # noqa: PLR2004
            control += 1
    return control > len(window) // 8


class ContentClassifier:
    """Classifies files by name and content using configured extension tables."""

    __slots__: Final = ("_config", "_logger", "_tables")

    def __init__(
        self,
        config: PreviewConfiguration | None = None,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._config = config if config is not None else PreviewConfiguration()
        self._logger = logger
        self._tables: tuple[tuple[frozenset[str], PreviewCategory], ...] = (
            (self._config.markdown_extensions, PreviewCategory.MARKDOWN),
            (self._config.text_extensions, PreviewCategory.TEXT),
            (self._config.image_extensions, PreviewCategory.IMAGE),
            (self._config.pdf_extensions, PreviewCategory.PDF),
            (self._config.word_extensions, PreviewCategory.WORD),
            (self._config.spreadsheet_extensions, PreviewCategory.SPREADSHEET),
            (self._config.presentation_extensions, PreviewCategory.PRESENTATION),
        )

    @property
    def config(self) -> PreviewConfiguration:
        return self._config

    def category_for_name(self, file_name: str | None) -> PreviewCategory:
        """Classify by extension tables, then by generic MIME type."""
        extension = extract_extension(file_name)
        if extension is not None:
            for table, category in self._tables:
                if extension in table:
                    return category

        detected = guess_mime_type(file_name)
        if detected is not None:
            if detected.startswith("text/"):
                return PreviewCategory.TEXT
            if detected.startswith("image/"):
                return PreviewCategory.IMAGE
            if detected == "application/pdf":
                return PreviewCategory.PDF
        return PreviewCategory.BINARY

    def mime_type_for(self, file_name: str | None, category: PreviewCategory) -> str:
        """Pick the content type for a classified file."""
        extension = extract_extension(file_name)
        match category:
            case PreviewCategory.MARKDOWN:
                return "text/markdown; charset=utf-8"
            case PreviewCategory.TEXT:
                return "text/plain; charset=utf-8"
            case PreviewCategory.IMAGE if extension == "svg":
                return "image/svg+xml"
            case PreviewCategory.IMAGE if extension is not None:
                return "image/" + ("jpeg" if extension == "jpg" else extension)
            case PreviewCategory.PDF:
                return "application/pdf"
            case PreviewCategory.WORD | PreviewCategory.SPREADSHEET | PreviewCategory.PRESENTATION:
                return _OFFICE_MIME_TYPES.get(extension or "", _OFFICE_DEFAULTS[category])
            case _:
                return guess_mime_type(file_name) or OCTET_STREAM

    def highlight_language(self, file_name: str | None) -> str | None:
        extension = extract_extension(file_name)
        if extension is None:
            return None
        return self._config.highlight_languages.get(extension)

    def classify(self, file_name: str | None, sample: bytes | None = None) -> Classification:
        """Classify a file by name and, if still binary, by content.

        Args:
            file_name: The file's name; only the extension is consulted.
            sample: Leading bytes of the content, if available.

        Returns:
            The classification.
        """
        category = self.category_for_name(file_name)
        if (
            category is PreviewCategory.BINARY
            and sample
            and is_likely_text(sample, self._config.max_sample_bytes)
        ):
            category = PreviewCategory.TEXT
            if self._logger is not None:
                self._logger.debug("content_reclassified_as_text", file_name=file_name)

        return Classification(
            category=category,
            mime_type=self.mime_type_for(file_name, category),
            highlight_language=self.highlight_language(file_name),
        )

    def decide_preview(self, file_name: str | None, content: bytes) -> PreviewDecision:
        """Decide whether file content may be rendered inline.

        Text-like content is inlined unless it exceeds ``max_inline_bytes`` or
        looks binary. Binary content is never inlined. Other categories
        (images, PDFs, office documents) are left to the client to embed.
        """
        classification = self.classify(file_name, content)
        if not classification.category.is_text_like:
            return PreviewDecision(
                classification=classification,
                inline=classification.category is not PreviewCategory.BINARY,
            )

        too_large = len(content) > self._config.max_inline_bytes
        binary_detected = is_likely_binary(content, self._config.binary_probe_bytes)
        return PreviewDecision(
            classification=classification,
            inline=not too_large and not binary_detected,
            too_large=too_large,
            binary_detected=binary_detected,
        )

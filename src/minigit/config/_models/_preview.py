"""Preview configuration model.

This module provides the PreviewConfiguration Pydantic model holding the
extension tables and size limits used by the content classifier.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

MARKDOWN_EXTENSIONS = frozenset({"md", "markdown", "mdown", "mkd"})

# CSV-like data files are text, not spreadsheets.
TEXT_EXTENSIONS = frozenset(
    {
        "txt", "log", "gitignore", "gitattributes", "java", "js", "ts", "css",
        "scss", "html", "xml", "json", "yml", "yaml", "properties", "gradle",
        "py", "rb", "go", "rs", "sh", "bat", "sql", "c", "h", "cpp", "hpp",
        "cs", "kt", "swift", "php", "pl", "r", "scala", "clj", "hs", "lua",
        "vim", "conf", "cfg", "ini", "env", "dockerfile", "makefile", "cmake",
        "toml", "lock", "proto", "thrift", "graphql", "dart", "elm", "erlang",
        "ex", "exs", "fs", "fsx", "ml", "mli", "nim", "pas", "pp", "tcl", "vb",
        "vbs", "asm", "s", "m", "mm", "plist", "strings",
        "csv", "tsv", "psv", "dsv",
    }
)  # fmt: skip

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "bmp", "svg", "webp", "avif"})
PDF_EXTENSIONS = frozenset({"pdf"})
WORD_EXTENSIONS = frozenset({"doc", "docx"})
SPREADSHEET_EXTENSIONS = frozenset({"xls", "xlsx"})
PRESENTATION_EXTENSIONS = frozenset({"ppt", "pptx"})

HIGHLIGHT_LANGUAGES: dict[str, str] = {
    "java": "java",
    "js": "javascript",
    "ts": "typescript",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "xml": "xml",
    "json": "json",
    "yml": "yaml",
    "yaml": "yaml",
    "sh": "bash",
    "bash": "bash",
    "bat": "dos",
    "py": "python",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "c": "c",
    "h": "c",
    "cpp": "cpp",
    "hpp": "cpp",
    "cs": "csharp",
    "kt": "kotlin",
    "swift": "swift",
    "sql": "sql",
}


class PreviewConfiguration(BaseModel):
    """Content classification and preview configuration.

    Attributes:
        max_sample_bytes: Bytes inspected by the text heuristic.
        max_inline_bytes: Largest text-like file rendered inline.
        binary_probe_bytes: Bytes inspected when checking text-like content
            for embedded binary data.
        markdown_extensions: Extensions classified as markdown.
        text_extensions: Extensions classified as plain text or code.
        image_extensions: Extensions classified as images.
        pdf_extensions: Extensions classified as PDF documents.
        word_extensions: Extensions classified as word-processing documents.
        spreadsheet_extensions: Extensions classified as spreadsheets.
        presentation_extensions: Extensions classified as presentations.
        highlight_languages: Extension to syntax-highlighter language map.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    max_sample_bytes: int = Field(default=8192, gt=0)
    max_inline_bytes: int = Field(default=1_048_576, gt=0)
    binary_probe_bytes: int = Field(default=4096, gt=0)

    markdown_extensions: frozenset[str] = MARKDOWN_EXTENSIONS
    text_extensions: frozenset[str] = TEXT_EXTENSIONS
    image_extensions: frozenset[str] = IMAGE_EXTENSIONS
    pdf_extensions: frozenset[str] = PDF_EXTENSIONS
    word_extensions: frozenset[str] = WORD_EXTENSIONS
    spreadsheet_extensions: frozenset[str] = SPREADSHEET_EXTENSIONS
    presentation_extensions: frozenset[str] = PRESENTATION_EXTENSIONS
    highlight_languages: dict[str, str] = Field(
        default_factory=lambda: dict(HIGHLIGHT_LANGUAGES)
    )

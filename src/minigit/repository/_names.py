"""Repository name validation and normalization.

Repository names arrive from URLs and form fields and end up as directory
names under the storage root, so only a single path segment built from
``[A-Za-z0-9_-]`` is accepted.
"""

import re

CANONICAL_SUFFIX = ".git"

_NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def _strip_suffix(name: str) -> str:
    if name.endswith(CANONICAL_SUFFIX):
        return name[: -len(CANONICAL_SUFFIX)]
    return name


def is_valid_repository_name(raw: str | None) -> bool:
    """Check whether a repository name is acceptable.

    One trailing ``.git`` is ignored. The remainder must be non-empty, free of
    ``..``, ``/`` and ``\\``, and consist only of ASCII letters, digits, ``_``
    and ``-``.

    Args:
        raw: The untrusted name, possibly None.

    Returns:
        True if the name may be used as a repository identifier.
    """
    if raw is None or not raw.strip():
        return False

    name = _strip_suffix(raw)
    if ".." in name or "/" in name or "\\" in name:
        return False
    return _NAME_PATTERN.fullmatch(name) is not None


def normalize_repository_name(raw: str) -> str:
    """Return the canonical form of a repository name.

    Surrounding whitespace is removed and ``.git`` is appended when missing.
    Applying it twice yields the same result as applying it once.
    """
    name = raw.strip()
    if name.endswith(CANONICAL_SUFFIX):
        return name
    return name + CANONICAL_SUFFIX


def display_name(canonical: str) -> str:
    """Return the name without its ``.git`` suffix."""
    return _strip_suffix(canonical)

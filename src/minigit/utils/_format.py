"""Byte and ref formatting helpers."""

LOCAL_BRANCH_PREFIX = "refs/heads/"

_UNITS = (("GB", 1024**3), ("MB", 1024**2), ("KB", 1024))


def decode_bytes(value: bytes | str) -> str:
    """Decode bytes to str if needed.

    Args:
        value: A bytes or str value.

    Returns:
        The value as a string. Undecodable bytes are replaced.
    """
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def strip_refs_heads(ref: str) -> str:
    """Return the short branch name for a ``refs/heads/`` ref.

    Other refs are returned unchanged.
    """
    if ref.startswith(LOCAL_BRANCH_PREFIX):
        return ref[len(LOCAL_BRANCH_PREFIX) :]
    return ref


def format_bytes(size: int) -> str:
    """Format a byte count for display.

    Examples:
        >>> format_bytes(512)
        '512 B'
        >>> format_bytes(1536)
        '1.5 KB'
    """
    for unit, factor in _UNITS:
        if size >= factor:
            return f"{size / factor:.1f} {unit}"
    return f"{size} B"

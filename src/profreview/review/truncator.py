"""Normalization and length bounding of submitted code."""

from profreview.config import DEFAULT_TRUNCATION_MARKER

TRUNCATION_MARKER = DEFAULT_TRUNCATION_MARKER


def truncate_code(code: str, max_chars: int, marker: str = TRUNCATION_MARKER) -> str:
    """Trim code and clip it to ``max_chars`` characters.

    Clipped code always ends with a marker line so both the model and the
    reader can see that the tail was omitted.

    Args:
        code: Raw submitted code.
        max_chars: Maximum number of code characters to keep.
        marker: Text of the omission marker line.

    Returns:
        The trimmed code, or its first ``max_chars`` characters followed by
        ``"\\n" + marker``.
    """
    if max_chars < 1:
        raise ValueError(f"max_chars must be positive, got {max_chars}")

    trimmed = code.strip()
    if len(trimmed) <= max_chars:
        return trimmed
    return f"{trimmed[:max_chars]}\n{marker}"

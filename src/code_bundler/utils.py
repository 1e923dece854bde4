"""
Utility functions for code-bundler.

Includes encoding detection, line ending normalization, and line splitting helpers used
when reading source files into a bundle.
"""

from __future__ import annotations

from pathlib import Path

import chardet

# BOM prefixes checked before any heuristic detection
_BOMS: tuple[tuple[bytes, str], ...] = (
    (b"\xef\xbb\xbf", "utf-8-sig"),
    (b"\xff\xfe", "utf-16"),
    (b"\xfe\xff", "utf-16"),
)


def detect_encoding(data: bytes) -> str:
    """Detect a likely text encoding for raw file content.

    Prefers UTF-8 and only consults `chardet` when strict UTF-8 decoding fails, so that
    UTF-8 sources are never misdetected as Latin-1/CP1252.

    Args:
        data: Raw file bytes.

    Returns:
        A normalized encoding label (e.g., `"utf-8"`, `"utf-8-sig"`, `"utf-16"`).
    """
    if not data:
        return "utf-8"

    # Check for BOM markers first (most reliable)
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return encoding

    try:
        data.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    result = chardet.detect(data)
    encoding_any = result.get("encoding")

    if not isinstance(encoding_any, str) or not encoding_any:
        return "utf-8"

    encoding = encoding_any.lower()
    if encoding in ("ascii", "utf8"):
        return "utf-8"

    return encoding


def decode_text(data: bytes) -> str:
    """Decode file bytes to text using the detected encoding.

    Undecodable bytes are replaced rather than raised; an unknown codec name falls back
    to UTF-8.
    """
    encoding = detect_encoding(data)
    try:
        return data.decode(encoding, errors="replace")
    except LookupError:
        return data.decode("utf-8", errors="replace")


def read_text_lines(file_path: Path) -> list[str]:
    """Read a file as a list of lines without their terminators.

    `\\r\\n`, `\\n` and `\\r` all end a line; a final terminator does not produce an
    extra empty line. OS errors propagate to the caller.

    Args:
        file_path: Path to the file to read.

    Returns:
        The file's lines, content preserved exactly.
    """
    return split_lines(decode_text(file_path.read_bytes()))


def normalize_line_endings(content: str) -> str:
    """Normalize line endings to LF (Unix-style).

    Args:
        content: Input text that may contain CRLF/CR/mixed endings.

    Returns:
        Content with all line endings normalized to LF.
    """
    # Replace CRLF first, then remaining CR, to avoid double-transforming CRLF.
    return content.replace("\r\n", "\n").replace("\r", "\n")


def split_lines(content: str) -> list[str]:
    """Split text into lines on any line ending, dropping one trailing empty line."""
    if not content:
        return []
    lines = normalize_line_endings(content).split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def is_blank(line: str) -> bool:
    """Return True for empty or whitespace-only lines."""
    return not line.strip()


def normalize_path(path: str) -> str:
    """Normalize a path for consistent cross-platform comparisons.

    Args:
        path: Path string that may contain platform-specific separators.

    Returns:
        Normalized path using forward slashes.
    """
    return path.replace("\\", "/")

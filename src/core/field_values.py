"""Lenient field value helpers shared by text decoders.

Text formats never fail on a malformed leaf value: numbers fall back
to zero and strings stop at the first NUL and at a UTF-8 character
boundary within their byte limit.
"""

from __future__ import annotations


def utf8_length(text: str) -> int:
    """Return the encoded UTF-8 byte length of ``text``."""
    return len(text.encode("utf-8"))


def bound_text(text: str, max_bytes: int) -> str:
    """Cut text at its first NUL and to at most ``max_bytes`` UTF-8 bytes.

    Args:
        text: Input text.
        max_bytes: Maximum encoded length.

    Returns:
        The longest NUL-free prefix of ``text`` that fits, never splitting
        a character.
    """
    text = text.split("\0", 1)[0]
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    return encoded[:max_bytes].decode("utf-8", errors="ignore")


def parse_float_or_zero(raw_value: str | None) -> tuple[float, bool]:
    """Parse a numeric text field, defaulting to zero.

    Args:
        raw_value: Raw field text, or None when the field is absent.

    Returns:
        Tuple of parsed value and whether the default was substituted.
    """
    if raw_value is None:
        return 0.0, True
    try:
        return float(raw_value.strip()), False
    except ValueError:
        return 0.0, True

"""Answer comparison helpers shared by the parser and every checker."""

import re

# \s does not match U+FEFF (byte-order mark).
_WHITESPACE = re.compile(r"[\s\ufeff]+")


def trim(text: str) -> str:
    """Like str.strip(), but also drops a leading byte-order mark."""
    return text.strip().lstrip("\ufeff").lstrip()


def split_tokens(text: str) -> list[str]:
    """Split on runs of whitespace, dropping empty tokens."""
    return [token for token in _WHITESPACE.split(text) if token]


def normalize_name(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def compare_names(a: str, b: str) -> bool:
    """Compare two names ignoring surrounding and repeated whitespace."""
    return normalize_name(a) == normalize_name(b)


def compare_arrays_unordered(a: list[str], b: list[str]) -> bool:
    """Compare two lists as multisets.

    Case-sensitive (Hebrew has no case); duplicates must match in count.
    """
    if len(a) != len(b):
        return False
    return sorted(a) == sorted(b)

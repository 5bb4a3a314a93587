"""Canonical name form used to compare folder and file names.

Example:
    >>> normalize_name("Tom Clancy's Rainbow Six 3")
    'tom clancys rainbow six'
    >>> normalize_name("mygame_launcher")
    'mygamelauncher'
"""

import re
from typing import List

# Anything that is neither a word character nor whitespace
_NON_WORD_PATTERN = re.compile(r"[^\w\s]")
_DIGIT_PATTERN = re.compile(r"\d+")
# Word characters and stray symbols that survive the first pass
_EXTRA_SYMBOL_PATTERN = re.compile(r"[_\-.,'()\[\]{}&+!@#$%^~;]")


def normalize_name(name: str) -> str:
    """Turn a folder or file name into its canonical token form.

    Lower-cases the name, then removes every character that is neither
    alphanumeric nor whitespace, every digit run, and the extra symbol set
    (which includes ``_``, a word character). Surrounding whitespace left
    behind by removed characters is stripped.

    Each pass only removes characters, so the result is idempotent:
    ``normalize_name(normalize_name(s)) == normalize_name(s)``.

    Args:
        name: Arbitrary folder or file name. May be empty.

    Returns:
        The normalized name; empty input gives empty output.
    """
    if not name:
        return ""

    normalized = name.lower()
    normalized = _NON_WORD_PATTERN.sub("", normalized)
    normalized = _DIGIT_PATTERN.sub("", normalized)
    normalized = _EXTRA_SYMBOL_PATTERN.sub("", normalized)
    return normalized.strip()


def name_tokens(normalized_name: str) -> List[str]:
    """Split a normalized name into its whitespace-delimited tokens."""
    return normalized_name.split()

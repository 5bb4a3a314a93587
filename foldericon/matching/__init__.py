"""Candidate matching package for foldericon.

This package contains the name normalizer and the CandidateSelector that
picks the file a folder's icon is taken from.

Example:
    >>> from foldericon.matching import CandidateSelector, normalize_name
    >>> normalize_name("My Game 2")
    'my game'
    >>> selector = CandidateSelector(priority=PriorityMode.ANY)
    >>> candidate = selector.select(target, listing)
"""

from .candidate_selector import CandidateSelector
from .name_normalizer import name_tokens, normalize_name

__all__ = [
    "CandidateSelector",
    "name_tokens",
    "normalize_name",
]

"""
Query validator.

A cheap length and keyword gate applied before retrieval or generation.
This is a coarse filter against obviously off-limits questions, NOT a
security boundary: it is trivially bypassed and must not be relied on to
protect credentials or anything else.

Dependencies: re
System role: Pre-retrieval query filter
"""

import re

DENYLIST_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(hack|exploit|attack|spam|abuse)\b", re.IGNORECASE),
    re.compile(r"\b(password|token|key|secret)\b", re.IGNORECASE),
)


def is_valid_query(query: object, max_length: int = 1000, min_length: int = 3) -> bool:
    """
    Check whether a query may be answered.

    Args:
        query: Candidate query; anything other than str is rejected
        max_length: Longest accepted query after trimming (varies per call site)
        min_length: Shortest accepted query after trimming

    Returns:
        bool: False for non-text, too short/long, or denylisted queries
    """
    if not isinstance(query, str):
        return False

    trimmed = query.strip()
    if len(trimmed) < min_length or len(trimmed) > max_length:
        return False

    return not any(pattern.search(trimmed) for pattern in DENYLIST_PATTERNS)

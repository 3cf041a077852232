"""Brute-force single-pattern search, kept as a reference for the automaton."""
from typing import List, Optional, Sequence, Tuple

from ac_common import Symbol


def _bounds(corpus: Sequence[Symbol], start: int, end: Optional[int]) -> Tuple[int, int]:
    if end is None:
        end = len(corpus)
    if not 0 <= start <= end <= len(corpus):
        raise IndexError(f"bad corpus bounds [{start}, {end}) for length {len(corpus)}")
    return start, end


def _matches_at(corpus: Sequence[Symbol], pattern: Sequence[Symbol], pos: int) -> bool:
    # compare from the last symbol backwards
    j = len(pattern) - 1
    while pattern[j] == corpus[pos + j]:
        if j == 0:
            return True
        j -= 1
    return False


def naive_search(
    corpus: Sequence[Symbol],
    pattern: Sequence[Symbol],
    start: int = 0,
    end: Optional[int] = None,
) -> int:
    """
    Start index of the first occurrence of `pattern` in corpus[start:end].
    Returns `end` when there is none.
    """
    start, end = _bounds(corpus, start, end)
    if start == end:
        return end  # nothing to search, not found
    if len(pattern) == 0:
        return start  # empty pattern matches at start
    if end - start < len(pattern):
        return end
    for pos in range(start, end - len(pattern) + 1):
        if _matches_at(corpus, pattern, pos):
            return pos
    return end


def naive_find_all(
    corpus: Sequence[Symbol],
    pattern: Sequence[Symbol],
    start: int = 0,
    end: Optional[int] = None,
) -> List[int]:
    """Every (overlapping) start index of `pattern` in corpus[start:end]."""
    start, end = _bounds(corpus, start, end)
    if start == end:
        return []
    if len(pattern) == 0:
        return list(range(start, end + 1))
    return [
        pos
        for pos in range(start, end - len(pattern) + 1)
        if _matches_at(corpus, pattern, pos)
    ]

"""
Id matching across string and numeric forms.

Persisted ids may predate a change in the catalog's id format ("1580" vs
"1580DX"). A candidate id matches a collection if it is string-equal to a
member, or if its numeric id equals a member's numeric id.

Any two ids with the same digit run match each other: "1580" matches
"1580DX" and "1580" matches "DX-1580". Ownership colouring and counts use
this loose matching.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

_DIGITS = re.compile(r"\d+")


def numeric_id(value: str | int | None) -> int | None:
    """
    Integer value of the first digit run in an id ("1580DX" -> 1580).

    Returns None for None, empty strings and ids without digits.
    """
    if value is None or value == "":
        return None
    match = _DIGITS.search(str(value))
    if match is None:
        return None
    return int(match.group(0))


@dataclass(frozen=True, slots=True)
class IdMatcher:
    """Membership test over a fixed id collection."""

    strings: frozenset[str]
    numbers: frozenset[int]

    @classmethod
    def from_ids(cls, ids: Iterable[str | int]) -> "IdMatcher":
        """Build the string set and numeric-prefix set once."""
        strings = frozenset(str(i) for i in ids)
        numbers = frozenset(n for n in (numeric_id(s) for s in strings) if n is not None)
        return cls(strings=strings, numbers=numbers)

    def matches(self, candidate: str | int) -> bool:
        """Exact string match, else numeric-id match."""
        text = str(candidate)
        if text in self.strings:
            return True
        number = numeric_id(text)
        return number is not None and number in self.numbers

    def __contains__(self, candidate: object) -> bool:
        if not isinstance(candidate, (str, int)):
            return False
        return self.matches(candidate)

    def count_matching(self, candidates: Iterable[str | int]) -> int:
        """Number of candidates that match (each candidate counted once per occurrence)."""
        return sum(1 for c in candidates if self.matches(c))

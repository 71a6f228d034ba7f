"""
Module: engine.page_ranges

Purpose:
    Parse page range strings such as "1-3, 5, 7-" into 1-based inclusive
    ranges over a sequence of known length.

Key Classes:
    - PageRange: One parsed range, keeping its source text as a label

Key Functions:
    - parse_page_ranges(): Parse a comma separated range string
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

from page_assembler.core.errors import InvalidPageRange

_TOKEN = re.compile(r"^(\d+)\s*(?:(-)\s*(\d*))?$")


@dataclass(frozen=True)
class PageRange:
    """
    Inclusive 1-based range.

    Example:
        >>> PageRange(2, 4, "2-4").positions
        (1, 2, 3)
    """

    start: int
    end: int
    label: str

    @property
    def positions(self) -> Tuple[int, ...]:
        """0-based positions covered by the range."""
        return tuple(range(self.start - 1, self.end))


def parse_page_ranges(spec: str, total: int) -> List[PageRange]:
    """
    Parse a range specification.

    Tokens are separated by commas. Each token is "n", "a-b" or the open
    form "a-" (through the last page). Blank tokens are skipped.

    Args:
        spec: Range string
        total: Number of pages available

    Returns:
        Ranges in the order written (duplicates allowed)

    Raises:
        InvalidPageRange: For malformed, reversed or out-of-bounds tokens,
            or when the spec contains no ranges at all

    Example:
        >>> [r.label for r in parse_page_ranges("1-2, 4-", 5)]
        ['1-2', '4-5']
    """
    ranges: List[PageRange] = []
    for raw in spec.split(","):
        token = raw.strip()
        if not token:
            continue
        match = _TOKEN.match(token)
        if not match:
            raise InvalidPageRange(token, "expected 'n' or 'a-b'")
        start = int(match.group(1))
        if match.group(2) is None:
            end = start
        elif match.group(3):
            end = int(match.group(3))
        else:
            end = total
        if start < 1 or start > total or end > total:
            raise InvalidPageRange(token, f"pages must be within 1..{total}")
        if start > end:
            raise InvalidPageRange(token, "start is after end")
        label = str(start) if start == end else f"{start}-{end}"
        ranges.append(PageRange(start=start, end=end, label=label))

    if not ranges:
        raise InvalidPageRange(spec, "no page ranges given")
    return ranges

"""Page-range expression parsing for the split tool.

The parser is permissive. Each number is read from its leading digits
(``"3abc"`` is page 3, ``"1.5"`` is page 1), a range uses the first two
``-`` separated fields (``"1-2-3"`` is ``1-2``), tokens without leading
digits are ignored, reversed ranges select nothing, and pages outside the
document are dropped. Callers decide whether an empty selection is an
error.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Sequence

_LEADING_INTEGER = re.compile(r"\s*([+-]?[0-9]+)")


def iter_tokens(expression: str | None) -> Iterator[str]:
    """Yield the non-empty, stripped comma separated tokens of *expression*."""

    if not expression:
        return
    for token in expression.split(","):
        token = token.strip()
        if token:
            yield token


def _parse_number(text: str) -> int | None:
    match = _LEADING_INTEGER.match(text)
    if match is None:
        return None
    return int(match.group(1))


def parse_range(expression: str | None, total_pages: int) -> List[int]:
    """Resolve *expression* into zero-based page indices.

    Args:
        expression: Comma separated 1-based page numbers (``"5"``) and
            inclusive ranges (``"2-7"``). ``None`` or a blank string selects
            every page.
        total_pages: Number of pages in the document the selection applies to.

    Returns:
        Indices in first-requested order without duplicates, each within
        ``0 <= index < total_pages``.

    Examples:
        >>> parse_range("2-3,5", 10)
        [1, 2, 4]
        >>> parse_range("1-3,2", 5)
        [0, 1, 2]
        >>> parse_range("5-2", 10)
        []
    """

    if total_pages <= 0:
        return []
    if expression is None or not expression.strip():
        return list(range(total_pages))

    selected: List[int] = []
    seen: set[int] = set()

    def add(page_number: int) -> None:
        if 1 <= page_number <= total_pages and page_number not in seen:
            seen.add(page_number)
            selected.append(page_number - 1)

    for token in iter_tokens(expression):
        if "-" in token:
            parts = token.split("-")
            start = _parse_number(parts[0])
            end = _parse_number(parts[1])
            if start is None or end is None or start > end:
                continue
            for page_number in range(max(start, 1), min(end, total_pages) + 1):
                add(page_number)
        else:
            page_number = _parse_number(token)
            if page_number is not None:
                add(page_number)

    return selected


def describe_selection(indices: Sequence[int]) -> str:
    """Render zero-based *indices* as a compact 1-based range expression."""

    runs: list[list[int]] = []
    for index in indices:
        page = index + 1
        if runs and page == runs[-1][1] + 1:
            runs[-1][1] = page
        else:
            runs.append([page, page])
    return ",".join(str(start) if start == end else f"{start}-{end}" for start, end in runs)


__all__ = ["iter_tokens", "parse_range", "describe_selection"]

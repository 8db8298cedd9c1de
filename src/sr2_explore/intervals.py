"""Greedy selection of non-overlapping scored byte spans.

Anything with integer `start`, `length` and `score` attributes can be
selected. Spans are ranked by (score desc, start desc) and accepted when
they do not intersect an already accepted span.

This is a greedy approximation of weighted interval scheduling, not an
optimum: two adjacent low-score spans can lose to one overlapping
higher-score span. Overlay output depends on this exact ordering.
"""
from __future__ import annotations

from typing import Iterable, Protocol, Sequence, TypeVar


class Span(Protocol):
    start: int
    length: int
    score: int


S = TypeVar("S", bound=Span)


def overlaps(a: Span, b: Span) -> bool:
    return a.start < b.start + b.length and b.start < a.start + a.length


def rank_key(span: Span) -> tuple[int, int]:
    return (-span.score, -span.start)


def select_greedy(spans: Iterable[S]) -> list[S]:
    """Pick a non-overlapping subset; result is ordered by start offset."""
    accepted: list[S] = []
    for span in sorted(spans, key=rank_key):
        if not any(overlaps(span, kept) for kept in accepted):
            accepted.append(span)
    return sorted(accepted, key=lambda s: s.start)


def coverage(spans: Sequence[Span]) -> int:
    """Total bytes covered by an already non-overlapping selection."""
    return sum(s.length for s in spans)

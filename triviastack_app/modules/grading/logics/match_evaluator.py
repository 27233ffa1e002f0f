"""
Match Evaluator - decides whether a free-text answer is accepted.

Pure logic: the result depends only on the user answer, the canonical answer
and the override texts passed in. Grading and the recomputation pass both
rely on being able to call it with any snapshot of overrides and get the
same verdict back.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .normalizer import normalize_answer, strip_html

# (max candidate length, allowed edits), ascending by length.
DEFAULT_TOLERANCE: Tuple[Tuple[int, int], ...] = ((3, 0), (7, 1))
DEFAULT_MAX_EDITS = 2

_ALTERNATIVE_SPLIT_RE = re.compile(r"\s*/\s*")
_PARENTHETICAL_RE = re.compile(r"\(([^()]*)\)")
_LAST_WORD_RE = re.compile(r"(\S+)$")
_MAX_PARENTHETICALS = 4


@dataclass(frozen=True)
class MatchResult:
    """Outcome of one evaluation."""
    accepted: bool
    normalized_answer: str
    matched_candidate: Optional[str] = None
    distance: Optional[int] = None


def allowed_edits(
    candidate: str,
    tolerance: Sequence[Tuple[int, int]] = DEFAULT_TOLERANCE,
    max_edits: int = DEFAULT_MAX_EDITS
) -> int:
    """Edit budget for a candidate of this length."""
    length = len(candidate)
    for max_length, edits in tolerance:
        if length <= max_length:
            return edits
    return max_edits


def levenshtein_distance(s1: str, s2: str, limit: Optional[int] = None) -> int:
    """
    Calculate Levenshtein distance between two strings.

    With ``limit`` the computation stops as soon as the distance is known to
    exceed it and returns ``limit + 1``.
    """
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1, limit)

    if len(s2) == 0:
        return len(s1)

    if limit is not None and len(s1) - len(s2) > limit:
        return limit + 1

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        if limit is not None and min(current_row) > limit:
            return limit + 1
        previous_row = current_row

    return previous_row[-1]


def _expand_parentheticals(text: str, depth: int = 0) -> list[str]:
    """
    Expand optional parenthetical fragments.

    "(Franklin) Roosevelt" -> "Roosevelt", "Franklin Roosevelt"
    "Mount (Mt.) Everest"  -> "Mount Everest", "Mount Mt. Everest", "Mt. Everest"

    A fragment between two words may also stand in for the word before it.
    """
    match = _PARENTHETICAL_RE.search(text)
    if not match or depth >= _MAX_PARENTHETICALS:
        return [text]

    before, inner, after = text[:match.start()], match.group(1), text[match.end():]
    variants = [
        f"{before} {after}",
        f"{before}{inner}{after}",
    ]

    prefix = before.rstrip()
    last_word = _LAST_WORD_RE.search(prefix)
    if last_word and inner.strip() and after.strip():
        variants.append(f"{prefix[:last_word.start()]}{inner} {after}")

    expanded: list[str] = []
    for variant in variants:
        expanded.extend(_expand_parentheticals(variant, depth + 1))
    return expanded


def expand_alternatives(canonical_answer: str) -> list[str]:
    """Split a canonical answer into its raw acceptable forms."""
    if not canonical_answer:
        return []

    text = strip_html(canonical_answer)
    parts = [text]
    if '/' in text:
        parts.extend(p for p in _ALTERNATIVE_SPLIT_RE.split(text) if p.strip())

    alternatives: list[str] = []
    for part in parts:
        alternatives.extend(_expand_parentheticals(part))
    return alternatives


def candidate_answers(canonical_answer: str, override_texts: Iterable[str] = ()) -> frozenset:
    """All normalized forms an answer may match. Empty forms never match."""
    candidates = {normalize_answer(alt) for alt in expand_alternatives(canonical_answer)}
    candidates.update(normalize_answer(text) for text in (override_texts or ()))
    candidates.discard('')
    return frozenset(candidates)


def evaluate_answer(
    user_answer: str,
    canonical_answer: str,
    override_texts: Iterable[str] = (),
    tolerance: Sequence[Tuple[int, int]] = DEFAULT_TOLERANCE,
    max_edits: int = DEFAULT_MAX_EDITS
) -> MatchResult:
    """Evaluate an answer and report which candidate matched, if any."""
    normalized = normalize_answer(user_answer)
    if not normalized:
        return MatchResult(accepted=False, normalized_answer='')

    candidates = sorted(candidate_answers(canonical_answer, override_texts))

    if normalized in candidates:
        return MatchResult(True, normalized, normalized, 0)

    for candidate in candidates:
        budget = allowed_edits(candidate, tolerance, max_edits)
        if budget <= 0 or abs(len(candidate) - len(normalized)) > budget:
            continue
        distance = levenshtein_distance(normalized, candidate, limit=budget)
        if distance <= budget:
            return MatchResult(True, normalized, candidate, distance)

    return MatchResult(accepted=False, normalized_answer=normalized)


def is_accepted(
    user_answer: str,
    canonical_answer: str,
    override_texts: Iterable[str] = (),
    tolerance: Sequence[Tuple[int, int]] = DEFAULT_TOLERANCE,
    max_edits: int = DEFAULT_MAX_EDITS
) -> bool:
    """Accept/reject a user answer against the canonical answer plus overrides."""
    return evaluate_answer(user_answer, canonical_answer, override_texts, tolerance, max_edits).accepted

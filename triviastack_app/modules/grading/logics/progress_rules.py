"""
Progress Rules - how verdicts roll up into CategoryProgress.

This module contains ONLY pure Python logic.
NO database, NO Flask, NO model dependencies allowed.

A scoring unit is a live-game slot (game, question) or, without a game,
(question, mode). Each unit counts once towards ``total`` and ``correct``;
its points are the sum of its verdicts' points. A slot is correct when the
verdict that first answered it is correct; any other unit is correct once it
holds a correct verdict. A later wrong answer does not take a correct practice
unit back, so the incremental delta never has to subtract.

The grading transaction applies ``progress_delta`` and the recomputation
pass calls ``aggregate_units``; both encode the rules above.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .scoring_policy import MODE_GAME


@dataclass(frozen=True)
class ProgressTotals:
    """Correct/total/points of one (user, category) rollup."""
    correct: int = 0
    total: int = 0
    points: int = 0

    def __add__(self, other: 'ProgressTotals') -> 'ProgressTotals':
        return ProgressTotals(
            self.correct + other.correct,
            self.total + other.total,
            self.points + other.points,
        )

    @property
    def is_zero(self) -> bool:
        return not (self.correct or self.total or self.points)


def is_slot_unit(mode: str, game_id: Optional[int]) -> bool:
    return mode == MODE_GAME and game_id is not None


def scoring_unit_key(question_id: int, mode: str, game_id: Optional[int] = None) -> tuple:
    if is_slot_unit(mode, game_id):
        return ('slot', game_id, question_id)
    return ('unit', question_id, mode)


def aggregate_units(verdicts: Iterable) -> ProgressTotals:
    """
    Rebuild totals from verdict rows.

    Each row needs: question_id, mode, game_id, correct, points, first_for_slot.
    """
    units: dict = {}
    for v in verdicts:
        key = scoring_unit_key(v.question_id, v.mode, v.game_id)
        unit = units.setdefault(key, {'counted': False, 'correct': False, 'points': 0})
        unit['points'] += v.points or 0
        if key[0] == 'slot':
            if v.first_for_slot:
                unit['counted'] = True
                unit['correct'] = bool(v.correct)
        else:
            unit['counted'] = True
            unit['correct'] = unit['correct'] or bool(v.correct)

    counted = [u for u in units.values() if u['counted']]
    return ProgressTotals(
        correct=sum(1 for u in counted if u['correct']),
        total=len(counted),
        points=sum(u['points'] for u in units.values()),
    )


def progress_delta(
    slot_unit: bool,
    unit_existed: bool,
    unit_was_correct: bool,
    slot_claimed: bool,
    correct: bool,
    awarded_points: int
) -> ProgressTotals:
    """
    Change one new verdict makes to its category rollup.

    For a slot only the claiming verdict counts; for any other unit the
    first verdict adds to ``total`` and the first correct one to ``correct``.
    """
    if slot_unit:
        return ProgressTotals(
            correct=1 if (slot_claimed and correct) else 0,
            total=1 if slot_claimed else 0,
            points=awarded_points,
        )
    return ProgressTotals(
        correct=1 if (correct and not unit_was_correct) else 0,
        total=0 if unit_existed else 1,
        points=awarded_points,
    )

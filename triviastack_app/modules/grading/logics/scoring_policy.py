"""
Scoring Policy - canonical point value of a verdict.

Pure logic for calculating points. No database access - only calculations
based on inputs, so the recomputation pass can re-derive the points of a
historical verdict from the context stored on its row.

Live games score the value the player saw (which may be a Final wager).
Practice scores the clue's face value, with a fixed value for Final clues
and a default when the face value is missing.
"""

from __future__ import annotations

from typing import Optional

MODE_GAME = 'GAME'
MODE_PRACTICE = 'PRACTICE'
MODES = (MODE_GAME, MODE_PRACTICE)

ROUND_SINGLE = 'SINGLE'
ROUND_DOUBLE = 'DOUBLE'
ROUND_FINAL = 'FINAL'
ROUNDS = (ROUND_SINGLE, ROUND_DOUBLE, ROUND_FINAL)

DEFAULT_CLUE_VALUE = 200
FINAL_CLUE_VALUE = 2000


def points_for(
    mode: str,
    round: str,
    face_value: Optional[int],
    correct: bool,
    displayed_points: Optional[int] = None
) -> int:
    """
    Points a verdict is worth.

    Args:
        mode: 'GAME' or 'PRACTICE'
        round: 'SINGLE', 'DOUBLE' or 'FINAL'
        face_value: The clue's face value when it was graded (may be None)
        correct: Whether the verdict is correct
        displayed_points: Value shown in a live game, if any

    Returns:
        Non-negative integer; 0 for an incorrect verdict.
    """
    if not correct:
        return 0

    if mode == MODE_GAME and displayed_points is not None:
        return max(int(displayed_points), 0)

    if round == ROUND_FINAL:
        return FINAL_CLUE_VALUE

    if not face_value:
        return DEFAULT_CLUE_VALUE
    return int(face_value)


def stats_points(round: str, face_value: Optional[int], correct: bool = True) -> int:
    """Normalized value used for leaderboards and client score sync."""
    return points_for(MODE_PRACTICE, round, face_value, correct)

"""Public API of the grading module."""
from typing import Iterable, Optional

from .logics.match_evaluator import is_accepted as _is_accepted
from .logics.normalizer import normalize_answer
from .services.grading_service import GradeResult, GradingService
from .services.override_service import OverrideService
from .services.recompute_service import RecomputeResult, RecomputeService


def grade(user_id: int, question_id: int, mode: str, round: str, raw_answer: str,
          game_id: Optional[int] = None, displayed_points: Optional[int] = None) -> GradeResult:
    return GradingService.grade(user_id, question_id, mode, round, raw_answer, game_id, displayed_points)


def is_accepted(user_answer: str, canonical_answer: str, override_texts: Iterable[str] = ()) -> bool:
    return _is_accepted(user_answer, canonical_answer, override_texts)


def recompute(user_id: int, question_id: int, adjudicated_verdict_ids=(), dispute_id=None,
              override_id=None) -> RecomputeResult:
    """Run the recomputation pass. Caller owns the unit of work."""
    return RecomputeService.recompute(user_id, question_id, adjudicated_verdict_ids, dispute_id, override_id)


def upsert_override(question_id: int, raw_text: str, created_by_user_id: int, source: str, notes: str = None):
    return OverrideService.upsert_override(question_id, raw_text, created_by_user_id, source, notes)


def add_admin_override(question_id: int, raw_text: str, admin_user_id: int, notes: str = None) -> dict:
    return OverrideService.add_admin_override(question_id, raw_text, admin_user_id, notes)


__all__ = [
    'grade', 'is_accepted', 'normalize_answer', 'recompute', 'upsert_override', 'add_admin_override',
    'GradeResult', 'RecomputeResult',
]

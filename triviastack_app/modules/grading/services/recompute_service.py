"""
Retroactive Recomputation Pass
Re-judges a user's incorrect verdicts on one question under the current
override set and repairs every aggregate that depended on them.
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from flask import current_app
from sqlalchemy import update

from triviastack_app.core.error_handlers import NotFoundError
from triviastack_app.core.signals import verdicts_regraded
from triviastack_app.extensions import db
from triviastack_app.models import AnswerVerdict, Game, GameQuestion, Question, VerdictRegrade
from triviastack_app.utils.time_utils import utcnow

from ..logics.match_evaluator import evaluate_answer
from ..logics.progress_rules import ProgressTotals, is_slot_unit
from ..logics.scoring_policy import points_for
from .aggregate_service import AggregateService
from .grading_service import match_settings
from .override_service import OverrideService


@dataclass
class RecomputeResult:
    user_id: int
    question_id: int
    flipped_verdict_ids: List[int] = field(default_factory=list)
    points_delta: int = 0
    games_touched: List[int] = field(default_factory=list)
    progress: ProgressTotals = field(default_factory=ProgressTotals)
    dispute_id: Optional[int] = None
    override_id: Optional[int] = None

    @property
    def changed(self) -> bool:
        return bool(self.flipped_verdict_ids)

    def to_dict(self) -> dict:
        return {
            'flipped_verdict_ids': list(self.flipped_verdict_ids),
            'points_delta': self.points_delta,
            'games_touched': list(self.games_touched),
            'category_progress': {
                'correct': self.progress.correct,
                'total': self.progress.total,
                'points': self.progress.points,
            },
        }

    def announce(self, source: str) -> None:
        """Send ``verdicts_regraded``. Call only after the unit of work committed."""
        if not self.changed:
            return
        verdicts_regraded.send(
            None,
            user_id=self.user_id,
            question_id=self.question_id,
            verdict_ids=list(self.flipped_verdict_ids),
            points_delta=self.points_delta,
            source=source,
        )


class RecomputeService:

    @staticmethod
    def recompute(user_id: int, question_id: int, adjudicated_verdict_ids: Iterable[int] = (),
                  dispute_id: Optional[int] = None, override_id: Optional[int] = None) -> RecomputeResult:
        """
        Run the pass for one (user, question). Must run inside a unit of work.

        ``adjudicated_verdict_ids`` are verdicts a reviewer ruled correct
        directly (an approved dispute); they flip even when the new override
        text does not match their raw answer lexically.

        Only verdicts currently marked incorrect are loaded, so a second run
        without a new override changes nothing.
        """
        question = db.session.get(Question, question_id)
        if question is None:
            raise NotFoundError('Question not found', resource='question')

        overrides = OverrideService.get_override_texts(question_id)
        settings = match_settings()
        adjudicated = set(adjudicated_verdict_ids or ())
        result = RecomputeResult(user_id, question_id, dispute_id=dispute_id, override_id=override_id)
        slots_touched = set()

        incorrect = AnswerVerdict.query.filter(
            AnswerVerdict.user_id == user_id,
            AnswerVerdict.question_id == question_id,
            AnswerVerdict.correct.is_(False),
        ).order_by(AnswerVerdict.graded_at.asc(), AnswerVerdict.verdict_id.asc()).all()

        for verdict in incorrect:
            if verdict.verdict_id not in adjudicated:
                if not evaluate_answer(verdict.user_answer, question.answer, overrides, **settings).accepted:
                    continue

            slot_unit = is_slot_unit(verdict.mode, verdict.game_id)
            first_award = AggregateService.is_first_award(
                user_id, question_id, verdict.mode, verdict.game_id, slot_claimed=verdict.first_for_slot
            )
            # Context recorded at grading time, never the question's current value.
            new_points = 0
            if first_award:
                new_points = points_for(verdict.mode, verdict.round, verdict.face_value, True,
                                        verdict.displayed_points)

            db.session.add(VerdictRegrade(
                verdict_id=verdict.verdict_id,
                dispute_id=dispute_id,
                override_id=override_id,
                old_correct=False,
                new_correct=True,
                old_points=verdict.points,
                new_points=new_points,
                created_at=utcnow(),
            ))
            result.points_delta += new_points - verdict.points
            verdict.correct = True
            verdict.points = new_points
            verdict.regraded_at = utcnow()
            db.session.flush()
            result.flipped_verdict_ids.append(verdict.verdict_id)

            if slot_unit and verdict.first_for_slot:
                RecomputeService._repair_slot(verdict.game_id, question_id, new_points)
                slots_touched.add(verdict.game_id)
                if verdict.game_id not in result.games_touched:
                    result.games_touched.append(verdict.game_id)

        result.progress = AggregateService.rebuild_category_progress(user_id, question.category_id)

        if AggregateService.verification_enabled():
            AggregateService.verify_category_progress(user_id, question.category_id)
            for game_id in slots_touched:
                AggregateService.verify_game_score(game_id)
                AggregateService.verify_slot(game_id, question_id)

        if result.changed:
            current_app.logger.info(
                f"[Recompute] user={user_id} question={question_id} flipped={result.flipped_verdict_ids} "
                f"points_delta={result.points_delta} games={result.games_touched}"
            )
        return result

    @staticmethod
    def _repair_slot(game_id: int, question_id: int, points: int) -> None:
        """Mark the slot correct and add its points to the game score, once."""
        repaired = db.session.execute(
            update(GameQuestion)
            .where(
                GameQuestion.game_id == game_id,
                GameQuestion.question_id == question_id,
                GameQuestion.correct.is_(False),
            )
            .values(correct=True, points_awarded=points)
        )
        if repaired.rowcount and points:
            db.session.execute(
                update(Game)
                .where(Game.game_id == game_id)
                .values(current_score=Game.current_score + points)
            )

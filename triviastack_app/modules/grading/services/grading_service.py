"""
Grading Transaction
Judges one raw answer and writes the verdict with every dependent aggregate.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from flask import current_app
from sqlalchemy import update

from triviastack_app.core.error_handlers import AuthorizationError, NotFoundError, ValidationError
from triviastack_app.core.signals import question_answered
from triviastack_app.core.transactions import unit_of_work
from triviastack_app.extensions import db
from triviastack_app.models import AnswerVerdict, Game, GameQuestion, Question
from triviastack_app.utils.db_utils import insert_ignore
from triviastack_app.utils.time_utils import utcnow

from ..logics.match_evaluator import evaluate_answer
from ..logics.progress_rules import is_slot_unit, progress_delta
from ..logics.scoring_policy import MODE_GAME, MODE_PRACTICE, MODES, ROUNDS, points_for
from .aggregate_service import AggregateService
from .override_service import OverrideService


@dataclass
class GradeResult:
    correct: bool
    points: int
    can_dispute: bool
    verdict_id: int
    dispute_context: Optional[dict] = None
    unlocked_achievements: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'correct': self.correct,
            'points': self.points,
            'can_dispute': self.can_dispute,
            'verdict_id': self.verdict_id,
            'dispute_context': self.dispute_context,
            'unlocked_achievements': self.unlocked_achievements,
        }


def match_settings() -> dict:
    """Edit-distance thresholds from the app config."""
    return {
        'tolerance': tuple(tuple(pair) for pair in current_app.config.get('ANSWER_MATCH_TOLERANCE', ((3, 0), (7, 1)))),
        'max_edits': int(current_app.config.get('ANSWER_MATCH_MAX_EDITS', 2)),
    }


class GradingService:

    @staticmethod
    def _validate(mode, round, raw_answer, game_id, displayed_points):
        errors = {}
        if mode not in MODES:
            errors['mode'] = f'Must be one of {", ".join(MODES)}'
        if round not in ROUNDS:
            errors['round'] = f'Must be one of {", ".join(ROUNDS)}'
        if raw_answer is None or not str(raw_answer).strip():
            errors['answer'] = 'Answer must not be empty'
        if game_id is not None and mode == MODE_PRACTICE:
            errors['game_id'] = 'Practice answers cannot reference a game'
        if displayed_points is not None and displayed_points < 0:
            errors['displayed_points'] = 'Must not be negative'
        if errors:
            raise ValidationError('Invalid grading request', errors=errors)

    @staticmethod
    def _claim_slot(game_id, question_id, correct, points) -> bool:
        """Answer the slot unless another verdict already did. True when this call won."""
        insert_ignore(
            GameQuestion,
            ['game_id', 'question_id'],
            game_id=game_id,
            question_id=question_id,
            answered=False,
            correct=False,
            points_awarded=0,
        )
        result = db.session.execute(
            update(GameQuestion)
            .where(
                GameQuestion.game_id == game_id,
                GameQuestion.question_id == question_id,
                GameQuestion.answered.is_(False),
            )
            .values(answered=True, correct=correct, points_awarded=points if correct else 0)
        )
        return result.rowcount == 1

    @staticmethod
    def grade(user_id: int, question_id: int, mode: str, round: str, raw_answer: str,
              game_id: Optional[int] = None, displayed_points: Optional[int] = None) -> GradeResult:
        """
        Grade one answer atomically.

        Writes the verdict, claims the game slot and bumps the game score when
        a game is attached, and updates CategoryProgress. Points are only
        awarded to the first award of a scoring unit.
        """
        GradingService._validate(mode, round, raw_answer, game_id, displayed_points)

        with unit_of_work('grade'):
            question = db.session.get(Question, question_id)
            if question is None:
                raise NotFoundError('Question not found', resource='question')

            if game_id is not None:
                game = db.session.get(Game, game_id)
                if game is None:
                    raise NotFoundError('Game not found', resource='game')
                if game.user_id != user_id:
                    raise AuthorizationError('Game belongs to another user')

            overrides = OverrideService.get_override_texts(question_id)
            match = evaluate_answer(raw_answer, question.answer, overrides, **match_settings())
            correct = match.accepted

            # Context kept on the row so the verdict can be re-derived later.
            face_value = question.value
            stored_displayed = displayed_points if mode == MODE_GAME else None
            full_points = points_for(mode, round, face_value, correct, stored_displayed)

            slot_unit = is_slot_unit(mode, game_id)
            unit_existed, unit_was_correct = AggregateService.unit_state(user_id, question_id, mode, game_id)

            slot_claimed = False
            if slot_unit:
                slot_claimed = GradingService._claim_slot(game_id, question_id, correct, full_points)

            first_award = AggregateService.is_first_award(user_id, question_id, mode, game_id, slot_claimed)
            awarded = full_points if (correct and first_award) else 0

            if slot_unit and slot_claimed and awarded:
                db.session.execute(
                    update(Game)
                    .where(Game.game_id == game_id)
                    .values(current_score=Game.current_score + awarded)
                )

            verdict = AnswerVerdict(
                user_id=user_id,
                question_id=question_id,
                game_id=game_id,
                mode=mode,
                round=round,
                face_value=face_value,
                displayed_points=stored_displayed,
                user_answer=raw_answer,
                correct=correct,
                points=awarded,
                first_for_slot=slot_claimed,
                graded_at=utcnow(),
            )
            db.session.add(verdict)
            db.session.flush()

            delta = progress_delta(slot_unit, unit_existed, unit_was_correct, slot_claimed, correct, awarded)
            AggregateService.apply_progress_delta(user_id, question.category_id, delta)

            if AggregateService.verification_enabled():
                AggregateService.verify_category_progress(user_id, question.category_id)
                if slot_unit:
                    AggregateService.verify_game_score(game_id)
                    AggregateService.verify_slot(game_id, question_id)

            verdict_id = verdict.verdict_id

        current_app.logger.info(
            f"[Grading] user={user_id} question={question_id} mode={mode} game={game_id} "
            f"correct={correct} points={awarded}"
        )

        dispute_context = None
        if not correct:
            dispute_context = {
                'question_id': question_id,
                'game_id': game_id,
                'round': round,
                'user_answer': raw_answer,
                'mode': mode,
            }

        question_answered.send(
            None,
            user_id=user_id,
            question_id=question_id,
            game_id=game_id,
            mode=mode,
            correct=correct,
            points=awarded,
            verdict_id=verdict_id,
        )

        from triviastack_app.modules.achievements.interface import (
            EVENT_QUESTION_ANSWERED, evaluate_achievements
        )
        unlocked = evaluate_achievements(user_id, EVENT_QUESTION_ANSWERED, {
            'question_id': question_id,
            'game_id': game_id,
            'mode': mode,
            'correct': correct,
            'points': awarded,
        })

        return GradeResult(
            correct=correct,
            points=awarded,
            can_dispute=not correct,
            verdict_id=verdict_id,
            dispute_context=dispute_context,
            unlocked_achievements=unlocked,
        )

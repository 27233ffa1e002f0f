"""
Aggregate Service
Scoring-unit predicates, CategoryProgress upkeep and invariant checks.

Everything here runs inside the caller's unit of work and never commits.
"""
from flask import current_app
from sqlalchemy import func, update

from triviastack_app.core.error_handlers import ConsistencyFailure
from triviastack_app.extensions import db
from triviastack_app.models import AnswerVerdict, CategoryProgress, Game, GameQuestion, Question
from triviastack_app.utils.db_utils import insert_ignore

from ..logics.progress_rules import ProgressTotals, aggregate_units, is_slot_unit


class AggregateService:

    # ------------------------------------------------------------------
    # Scoring units
    # ------------------------------------------------------------------
    @staticmethod
    def _unit_query(user_id, question_id, mode, game_id=None):
        query = AnswerVerdict.query.filter(
            AnswerVerdict.user_id == user_id,
            AnswerVerdict.question_id == question_id,
            AnswerVerdict.mode == mode,
        )
        if game_id is None:
            return query.filter(AnswerVerdict.game_id.is_(None))
        return query.filter(AnswerVerdict.game_id == game_id)

    @staticmethod
    def unit_state(user_id, question_id, mode, game_id=None):
        """(unit has any verdict, unit has a correct verdict)."""
        query = AggregateService._unit_query(user_id, question_id, mode, game_id)
        existed = db.session.query(query.exists()).scalar()
        was_correct = existed and db.session.query(
            query.filter(AnswerVerdict.correct.is_(True)).exists()
        ).scalar()
        return bool(existed), bool(was_correct)

    @staticmethod
    def is_first_award(user_id, question_id, mode, game_id=None, slot_claimed=None) -> bool:
        """
        Whether a correct verdict in this scoring unit earns points.

        Live-game slot: only the verdict that first answered the slot.
        Anything else: only while the unit holds no correct verdict.
        """
        if is_slot_unit(mode, game_id):
            return bool(slot_claimed)
        _, was_correct = AggregateService.unit_state(user_id, question_id, mode, game_id)
        return not was_correct

    # ------------------------------------------------------------------
    # CategoryProgress
    # ------------------------------------------------------------------
    @staticmethod
    def derive_category_progress(user_id, category_id) -> ProgressTotals:
        """Totals as the verdict history defines them."""
        verdicts = (
            db.session.query(
                AnswerVerdict.question_id,
                AnswerVerdict.mode,
                AnswerVerdict.game_id,
                AnswerVerdict.correct,
                AnswerVerdict.points,
                AnswerVerdict.first_for_slot,
            )
            .join(Question, Question.question_id == AnswerVerdict.question_id)
            .filter(AnswerVerdict.user_id == user_id, Question.category_id == category_id)
            .all()
        )
        return aggregate_units(verdicts)

    @staticmethod
    def _ensure_progress_row(user_id, category_id):
        insert_ignore(
            CategoryProgress,
            ['user_id', 'category_id'],
            user_id=user_id,
            category_id=category_id,
            correct=0,
            total=0,
            points=0,
        )

    @staticmethod
    def apply_progress_delta(user_id, category_id, delta: ProgressTotals) -> None:
        """Incremental path used by grading."""
        if delta.is_zero:
            return
        AggregateService._ensure_progress_row(user_id, category_id)
        db.session.execute(
            update(CategoryProgress)
            .where(CategoryProgress.user_id == user_id, CategoryProgress.category_id == category_id)
            .values(
                correct=CategoryProgress.correct + delta.correct,
                total=CategoryProgress.total + delta.total,
                points=CategoryProgress.points + delta.points,
            )
        )

    @staticmethod
    def rebuild_category_progress(user_id, category_id) -> ProgressTotals:
        """Full rebuild of one (user, category) rollup from every verdict in the category."""
        totals = AggregateService.derive_category_progress(user_id, category_id)
        AggregateService._ensure_progress_row(user_id, category_id)
        db.session.execute(
            update(CategoryProgress)
            .where(CategoryProgress.user_id == user_id, CategoryProgress.category_id == category_id)
            .values(correct=totals.correct, total=totals.total, points=totals.points)
        )
        return totals

    @staticmethod
    def stored_category_progress(user_id, category_id) -> ProgressTotals:
        row = (
            db.session.query(CategoryProgress.correct, CategoryProgress.total, CategoryProgress.points)
            .filter(CategoryProgress.user_id == user_id, CategoryProgress.category_id == category_id)
            .first()
        )
        if row is None:
            return ProgressTotals()
        return ProgressTotals(row.correct, row.total, row.points)

    # ------------------------------------------------------------------
    # Invariant checks
    # ------------------------------------------------------------------
    @staticmethod
    def verification_enabled() -> bool:
        return bool(current_app.config.get('GRADING_VERIFY_AGGREGATES', True))

    @staticmethod
    def verify_category_progress(user_id, category_id) -> None:
        stored = AggregateService.stored_category_progress(user_id, category_id)
        derived = AggregateService.derive_category_progress(user_id, category_id)
        if stored != derived:
            raise ConsistencyFailure(
                'CategoryProgress does not match verdict history',
                details={
                    'user_id': user_id,
                    'category_id': category_id,
                    'stored': stored.__dict__,
                    'derived': derived.__dict__,
                },
            )

    @staticmethod
    def expected_game_score(game_id) -> int:
        return db.session.query(func.coalesce(func.sum(GameQuestion.points_awarded), 0)).filter(
            GameQuestion.game_id == game_id, GameQuestion.correct.is_(True)
        ).scalar()

    @staticmethod
    def verify_game_score(game_id) -> None:
        stored = db.session.query(Game.current_score).filter(Game.game_id == game_id).scalar()
        expected = AggregateService.expected_game_score(game_id)
        if stored != expected:
            raise ConsistencyFailure(
                'Game score does not match its correct slots',
                details={'game_id': game_id, 'stored': stored, 'expected': expected},
            )

    @staticmethod
    def verify_slot(game_id, question_id) -> None:
        slot = (
            db.session.query(GameQuestion.answered, GameQuestion.correct)
            .filter(GameQuestion.game_id == game_id, GameQuestion.question_id == question_id)
            .first()
        )
        first = (
            db.session.query(AnswerVerdict.correct)
            .filter(
                AnswerVerdict.game_id == game_id,
                AnswerVerdict.question_id == question_id,
                AnswerVerdict.first_for_slot.is_(True),
            )
            .first()
        )
        if slot is None or first is None or not slot.answered or bool(slot.correct) != bool(first.correct):
            raise ConsistencyFailure(
                'Game slot disagrees with the verdict that answered it',
                details={
                    'game_id': game_id,
                    'question_id': question_id,
                    'slot_correct': None if slot is None else bool(slot.correct),
                    'verdict_correct': None if first is None else bool(first.correct),
                },
            )

"""
Override Store
Accepted-answer texts per question, always stored normalized.
"""
from flask import current_app

from triviastack_app.core.error_handlers import AuthorizationError, NotFoundError, ValidationError
from triviastack_app.core.transactions import unit_of_work
from triviastack_app.extensions import db
from triviastack_app.models import AnswerOverride, AnswerVerdict, Question, User
from triviastack_app.utils.db_utils import insert_ignore
from triviastack_app.utils.time_utils import utcnow

from ..logics.normalizer import normalize_answer


class OverrideService:
    """Dịch vụ quản lý đáp án được chấp nhận thêm."""

    @staticmethod
    def get_override_texts(question_id: int) -> frozenset:
        """Current override set of a question, read fresh from the store."""
        rows = db.session.query(AnswerOverride.text).filter(AnswerOverride.question_id == question_id).all()
        return frozenset(row.text for row in rows)

    @staticmethod
    def list_overrides(question_id: int) -> list:
        if db.session.get(Question, question_id) is None:
            raise NotFoundError('Question not found', resource='question')
        return AnswerOverride.query.filter_by(question_id=question_id)\
            .order_by(AnswerOverride.created_at.asc(), AnswerOverride.override_id.asc()).all()

    @staticmethod
    def upsert_override(question_id: int, raw_text: str, created_by_user_id: int,
                        source: str, notes: str = None):
        """
        Return the override for (question, normalized text), creating it if needed.

        Must run inside the caller's unit of work. Returns (override, created).
        """
        normalized = normalize_answer(raw_text)
        if not normalized:
            raise ValidationError('Override text is empty after normalization',
                                  errors={'override_text': raw_text})
        if source not in (AnswerOverride.SOURCE_ADMIN, AnswerOverride.SOURCE_DISPUTE):
            raise ValidationError(f'Unknown override source: {source}')

        created = insert_ignore(
            AnswerOverride,
            ['question_id', 'text'],
            question_id=question_id,
            text=normalized,
            source=source,
            created_by_user_id=created_by_user_id,
            notes=notes or None,
            created_at=utcnow(),
        )
        override = AnswerOverride.query.filter_by(question_id=question_id, text=normalized).one()

        if created:
            current_app.logger.info(
                f"[Overrides] Added {source} override '{normalized}' to question {question_id}"
            )
        return override, created

    @staticmethod
    def add_admin_override(question_id: int, raw_text: str, admin_user_id: int, notes: str = None) -> dict:
        """
        Admin curation: add an accepted answer and repair every affected user.

        The recomputation pass runs once per user holding an incorrect verdict
        on the question, each scoped to (user, question), all in one unit of work.
        """
        from .recompute_service import RecomputeService

        with unit_of_work('admin_override'):
            admin = db.session.get(User, admin_user_id)
            if admin is None or not admin.is_admin:
                raise AuthorizationError('Admin access required')
            if db.session.get(Question, question_id) is None:
                raise NotFoundError('Question not found', resource='question')

            override, created = OverrideService.upsert_override(
                question_id, raw_text, admin_user_id, AnswerOverride.SOURCE_ADMIN, notes
            )

            results = []
            if created:
                user_ids = [
                    row.user_id for row in db.session.query(AnswerVerdict.user_id)
                    .filter(AnswerVerdict.question_id == question_id, AnswerVerdict.correct.is_(False))
                    .distinct().order_by(AnswerVerdict.user_id).all()
                ]
                for user_id in user_ids:
                    results.append(RecomputeService.recompute(user_id, question_id, override_id=override.override_id))

        flipped = sum(len(r.flipped_verdict_ids) for r in results)
        current_app.logger.info(
            f"[Overrides] Admin override {override.override_id} on question {question_id}: "
            f"{len(results)} users recomputed, {flipped} verdicts flipped"
        )
        for result in results:
            result.announce(source=AnswerOverride.SOURCE_ADMIN)

        return {
            'override': override.to_dict(),
            'created': created,
            'users_recomputed': len(results),
            'verdicts_flipped': flipped,
        }

"""
Dispute Lifecycle
PENDING -> APPROVED | REJECTED. Resolved disputes are terminal and never deleted.
"""
from datetime import timedelta
from typing import Optional

from flask import current_app
from sqlalchemy import update

from triviastack_app.core.error_handlers import (
    AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from triviastack_app.core.signals import dispute_approved, dispute_rejected, dispute_submitted
from triviastack_app.core.transactions import unit_of_work
from triviastack_app.extensions import db
from triviastack_app.models import AnswerDispute, AnswerOverride, AnswerVerdict, Game, Question, User
from triviastack_app.modules.grading.interface import normalize_answer, recompute, upsert_override
from triviastack_app.modules.grading.logics.scoring_policy import MODES, points_for
from triviastack_app.utils.pagination import get_pagination_data, pagination_to_dict
from triviastack_app.utils.time_utils import ensure_utc, utcnow


def _same_game(column, game_id):
    return column.is_(None) if game_id is None else column == game_id


class DisputeService:
    """Dịch vụ xử lý khiếu nại kết quả chấm."""

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    @staticmethod
    def submit_dispute(user_id: int, question_id: int, raw_answer: str, game_id: Optional[int] = None) -> AnswerDispute:
        """
        Open a dispute against the user's latest verdict on the question.

        Only an incorrect verdict can be disputed, and only one dispute per
        (user, question, game) may be pending at a time.
        """
        if raw_answer is None or not str(raw_answer).strip():
            raise ValidationError('Answer must not be empty', errors={'answer': 'required'})

        with unit_of_work('submit_dispute'):
            if db.session.get(Question, question_id) is None:
                raise NotFoundError('Question not found', resource='question')
            if game_id is not None:
                game = db.session.get(Game, game_id)
                if game is None:
                    raise NotFoundError('Game not found', resource='game')
                if game.user_id != user_id:
                    raise AuthorizationError('Game belongs to another user')

            verdict_query = AnswerVerdict.query.filter(
                AnswerVerdict.user_id == user_id,
                AnswerVerdict.question_id == question_id,
            )
            if game_id is not None:
                verdict_query = verdict_query.filter(AnswerVerdict.game_id == game_id)
            verdict = verdict_query.order_by(
                AnswerVerdict.graded_at.desc(), AnswerVerdict.verdict_id.desc()
            ).first()

            if verdict is None:
                raise NotFoundError('No graded answer to dispute', resource='verdict')
            if verdict.correct:
                raise ConflictError('The latest answer was already marked correct',
                                    details={'verdict_id': verdict.verdict_id})

            pending = AnswerDispute.query.filter(
                AnswerDispute.user_id == user_id,
                AnswerDispute.question_id == question_id,
                _same_game(AnswerDispute.game_id, game_id),
                AnswerDispute.status == AnswerDispute.STATUS_PENDING,
            ).first()
            if pending is not None:
                raise ConflictError('A dispute for this answer is already pending',
                                    details={'dispute_id': pending.dispute_id})

            dispute = AnswerDispute(
                user_id=user_id,
                question_id=question_id,
                game_id=game_id,
                verdict_id=verdict.verdict_id,
                mode=verdict.mode,
                round=verdict.round,
                user_answer=raw_answer,
                status=AnswerDispute.STATUS_PENDING,
                created_at=utcnow(),
            )
            db.session.add(dispute)
            db.session.flush()
            dispute_id = dispute.dispute_id

        current_app.logger.info(
            f"[Disputes] user={user_id} opened dispute {dispute_id} on question {question_id} (game={game_id})"
        )
        dispute_submitted.send(None, dispute_id=dispute_id, user_id=user_id,
                               question_id=question_id, game_id=game_id)
        return dispute

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    @staticmethod
    def _require_resolver(resolver_id: int) -> User:
        resolver = db.session.get(User, resolver_id)
        if resolver is None or not resolver.is_admin:
            raise AuthorizationError('Only admins can resolve disputes')
        return resolver

    @staticmethod
    def _claim(dispute_id: int, status: str, resolver_id: int, note: Optional[str]) -> AnswerDispute:
        """Move a PENDING dispute to ``status``; a second resolver loses with Conflict."""
        dispute = db.session.get(AnswerDispute, dispute_id)
        if dispute is None:
            raise NotFoundError('Dispute not found', resource='dispute')

        claimed = db.session.execute(
            update(AnswerDispute)
            .where(
                AnswerDispute.dispute_id == dispute_id,
                AnswerDispute.status == AnswerDispute.STATUS_PENDING,
            )
            .values(status=status, admin_id=resolver_id, admin_comment=note or None, resolved_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount != 1:
            raise ConflictError('Dispute already resolved',
                                details={'dispute_id': dispute_id, 'status': dispute.status})
        return dispute

    @staticmethod
    def _adjudicated_verdict_ids(dispute: AnswerDispute) -> list:
        """
        The linked verdict plus incorrect verdicts of the same slot, graded around
        submission, whose raw answer normalizes to the disputed answer.

        Other wrong answers in the window are left to the override set.
        """
        window = timedelta(seconds=current_app.config.get('DISPUTE_MATCH_WINDOW_SECONDS', 60))
        submitted_at = ensure_utc(dispute.created_at)
        disputed = normalize_answer(dispute.user_answer)

        rows = db.session.query(AnswerVerdict.verdict_id, AnswerVerdict.user_answer).filter(
            AnswerVerdict.user_id == dispute.user_id,
            AnswerVerdict.question_id == dispute.question_id,
            _same_game(AnswerVerdict.game_id, dispute.game_id),
            AnswerVerdict.correct.is_(False),
            AnswerVerdict.graded_at >= submitted_at - window,
            AnswerVerdict.graded_at <= submitted_at + window,
        ).all()

        ids = [row.verdict_id for row in rows if normalize_answer(row.user_answer) == disputed]
        if dispute.verdict_id is not None and dispute.verdict_id not in ids:
            ids.append(dispute.verdict_id)
        return ids

    @staticmethod
    def approve_dispute(dispute_id: int, resolver_id: int, note: Optional[str] = None,
                        override_text: Optional[str] = None) -> dict:
        """
        Approve a dispute and repair the disputant's history in one unit of work.

        The override text defaults to the answer the user submitted. An
        override with the same normalized text is reused.
        """
        with unit_of_work('approve_dispute'):
            DisputeService._require_resolver(resolver_id)
            dispute = DisputeService._claim(dispute_id, AnswerDispute.STATUS_APPROVED, resolver_id, note)

            text = override_text if override_text and override_text.strip() else dispute.user_answer
            override, override_created = upsert_override(
                dispute.question_id, text, resolver_id, AnswerOverride.SOURCE_DISPUTE, note
            )
            db.session.execute(
                update(AnswerDispute)
                .where(AnswerDispute.dispute_id == dispute_id)
                .values(override_id=override.override_id)
                .execution_options(synchronize_session=False)
            )

            result = recompute(
                dispute.user_id,
                dispute.question_id,
                adjudicated_verdict_ids=DisputeService._adjudicated_verdict_ids(dispute),
                dispute_id=dispute_id,
                override_id=override.override_id,
            )
            user_id, question_id = dispute.user_id, dispute.question_id

        current_app.logger.info(
            f"[Disputes] Dispute {dispute_id} approved by {resolver_id}: override '{override.text}' "
            f"({'new' if override_created else 'reused'}), flipped {result.flipped_verdict_ids}"
        )
        dispute_approved.send(None, dispute_id=dispute_id, user_id=user_id, question_id=question_id,
                              resolver_id=resolver_id, override_id=override.override_id,
                              flipped=list(result.flipped_verdict_ids))
        result.announce(source=AnswerOverride.SOURCE_DISPUTE)

        from triviastack_app.modules.achievements.interface import (
            EVENT_DISPUTE_APPROVED, evaluate_achievements
        )
        unlocked = evaluate_achievements(user_id, EVENT_DISPUTE_APPROVED, {
            'dispute_id': dispute_id,
            'question_id': question_id,
            'points_delta': result.points_delta,
        })

        return {
            'dispute': dispute.to_dict(),
            'override_created': override_created,
            'recompute': result.to_dict(),
            'unlocked_achievements': unlocked,
        }

    @staticmethod
    def reject_dispute(dispute_id: int, resolver_id: int, note: Optional[str] = None) -> AnswerDispute:
        with unit_of_work('reject_dispute'):
            DisputeService._require_resolver(resolver_id)
            dispute = DisputeService._claim(dispute_id, AnswerDispute.STATUS_REJECTED, resolver_id, note)
            user_id, question_id = dispute.user_id, dispute.question_id

        current_app.logger.info(f"[Disputes] Dispute {dispute_id} rejected by {resolver_id}")
        dispute_rejected.send(None, dispute_id=dispute_id, user_id=user_id,
                              question_id=question_id, resolver_id=resolver_id)
        return dispute

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------
    @staticmethod
    def list_disputes(status: Optional[str] = None, mode: Optional[str] = None,
                      page: int = 1, per_page: Optional[int] = None) -> dict:
        """Newest first, optionally filtered by status and mode."""
        if status is not None and status not in AnswerDispute.STATUSES:
            raise ValidationError('Unknown dispute status', errors={'status': status})
        if mode is not None and mode not in MODES:
            raise ValidationError('Unknown mode', errors={'mode': mode})

        query = AnswerDispute.query
        if status:
            query = query.filter(AnswerDispute.status == status)
        if mode:
            query = query.filter(AnswerDispute.mode == mode)
        query = query.order_by(AnswerDispute.created_at.desc(), AnswerDispute.dispute_id.desc())

        pagination = get_pagination_data(query, page, per_page)
        return pagination_to_dict(pagination, lambda d: d.to_dict())

    @staticmethod
    def count_pending() -> int:
        return AnswerDispute.query.filter_by(status=AnswerDispute.STATUS_PENDING).count()

    @staticmethod
    def get_approved_for_game(game_id: int, user_id: int) -> list:
        """
        Approved disputes of a game resolved after it started, for client score sync.

        Each entry carries the points the scoring policy assigns to the
        disputed verdict.
        """
        game = db.session.get(Game, game_id)
        if game is None:
            raise NotFoundError('Game not found', resource='game')
        if game.user_id != user_id:
            raise AuthorizationError('Game belongs to another user')

        query = AnswerDispute.query.filter(
            AnswerDispute.game_id == game_id,
            AnswerDispute.status == AnswerDispute.STATUS_APPROVED,
        )
        if game.created_at is not None:
            query = query.filter(AnswerDispute.resolved_at >= game.created_at)

        approved = []
        for dispute in query.order_by(AnswerDispute.resolved_at.asc()).all():
            verdict = dispute.verdict
            if verdict is not None:
                points = points_for(verdict.mode, verdict.round, verdict.face_value, True,
                                    verdict.displayed_points)
            else:
                points = points_for(dispute.mode, dispute.round, dispute.question.value, True)
            approved.append({
                'dispute_id': dispute.dispute_id,
                'question_id': dispute.question_id,
                'user_answer': dispute.user_answer,
                'points': points,
                'resolved_at': dispute.resolved_at.isoformat() if dispute.resolved_at else None,
            })
        return approved

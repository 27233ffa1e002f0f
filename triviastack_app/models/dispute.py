"""User claims that a verdict of 'incorrect' was wrong."""

from __future__ import annotations

from sqlalchemy.sql import func

from ..db_instance import db


class AnswerDispute(db.Model):
    """Mô hình khiếu nại kết quả chấm. Never deleted; terminal once resolved."""

    __tablename__ = 'answer_disputes'

    STATUS_PENDING = 'PENDING'
    STATUS_APPROVED = 'APPROVED'
    STATUS_REJECTED = 'REJECTED'
    STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

    dispute_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.question_id'), nullable=False, index=True)
    game_id = db.Column(db.Integer, db.ForeignKey('games.game_id'), nullable=True)
    verdict_id = db.Column(db.Integer, db.ForeignKey('answer_verdicts.verdict_id'), nullable=True)
    mode = db.Column(db.String(10), nullable=False)
    round = db.Column(db.String(10), nullable=False)
    user_answer = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(10), default=STATUS_PENDING, nullable=False, index=True)
    admin_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=True)
    admin_comment = db.Column(db.Text, nullable=True)
    override_id = db.Column(db.Integer, db.ForeignKey('answer_overrides.override_id'), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    resolved_at = db.Column(db.DateTime(timezone=True), nullable=True)

    user = db.relationship('User', foreign_keys=[user_id])
    admin = db.relationship('User', foreign_keys=[admin_id])
    question = db.relationship('Question')
    override = db.relationship('AnswerOverride')
    verdict = db.relationship('AnswerVerdict', foreign_keys=[verdict_id])

    @property
    def is_resolved(self) -> bool:
        return self.status != self.STATUS_PENDING

    def to_dict(self) -> dict[str, object]:
        return {
            'dispute_id': self.dispute_id,
            'user_id': self.user_id,
            'question_id': self.question_id,
            'game_id': self.game_id,
            'verdict_id': self.verdict_id,
            'mode': self.mode,
            'round': self.round,
            'user_answer': self.user_answer,
            'status': self.status,
            'admin_id': self.admin_id,
            'admin_comment': self.admin_comment,
            'override': {'override_id': self.override.override_id, 'text': self.override.text} if self.override else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'resolved_at': self.resolved_at.isoformat() if self.resolved_at else None,
        }

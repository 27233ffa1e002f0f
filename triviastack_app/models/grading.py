"""Grading records: accepted-answer overrides, verdicts and their rollups."""

from __future__ import annotations

from sqlalchemy.sql import func

from ..db_instance import db


class AnswerOverride(db.Model):
    """An extra accepted answer text for one question. Append-only."""

    __tablename__ = 'answer_overrides'

    SOURCE_DISPUTE = 'DISPUTE'
    SOURCE_ADMIN = 'ADMIN'

    override_id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.question_id'), nullable=False, index=True)
    text = db.Column(db.String(512), nullable=False)  # stored normalized
    source = db.Column(db.String(10), nullable=False)
    created_by_user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    created_by = db.relationship('User')

    __table_args__ = (db.UniqueConstraint('question_id', 'text', name='_question_override_text_uc'),)

    def to_dict(self) -> dict[str, object]:
        return {
            'override_id': self.override_id,
            'question_id': self.question_id,
            'text': self.text,
            'source': self.source,
            'created_by_user_id': self.created_by_user_id,
            'notes': self.notes,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class AnswerVerdict(db.Model):
    """One grading event.

    The raw answer and the scoring context (mode, round, face value,
    displayed points) are kept so the verdict can be re-derived. Only the
    recomputation pass may change ``correct`` and ``points`` afterwards, and
    every such change is logged in VerdictRegrade.
    """

    __tablename__ = 'answer_verdicts'

    MODE_GAME = 'GAME'
    MODE_PRACTICE = 'PRACTICE'

    verdict_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.question_id'), nullable=False)
    game_id = db.Column(db.Integer, db.ForeignKey('games.game_id'), nullable=True, index=True)
    mode = db.Column(db.String(10), nullable=False)
    round = db.Column(db.String(10), nullable=False)
    face_value = db.Column(db.Integer, nullable=True)
    displayed_points = db.Column(db.Integer, nullable=True)
    user_answer = db.Column(db.Text, nullable=False)
    correct = db.Column(db.Boolean, nullable=False)
    points = db.Column(db.Integer, default=0, nullable=False)
    # True for the verdict that answered its game slot first.
    first_for_slot = db.Column(db.Boolean, default=False, nullable=False)
    graded_at = db.Column(db.DateTime(timezone=True), nullable=False)
    regraded_at = db.Column(db.DateTime(timezone=True), nullable=True)

    question = db.relationship('Question')
    regrades = db.relationship(
        'VerdictRegrade',
        backref='verdict',
        cascade='all, delete-orphan',
        order_by='VerdictRegrade.created_at',
        lazy=True,
    )

    __table_args__ = (
        db.Index('ix_answer_verdicts_user_question', 'user_id', 'question_id'),
    )

    def to_dict(self) -> dict[str, object]:
        return {
            'verdict_id': self.verdict_id,
            'user_id': self.user_id,
            'question_id': self.question_id,
            'game_id': self.game_id,
            'mode': self.mode,
            'round': self.round,
            'user_answer': self.user_answer,
            'correct': self.correct,
            'points': self.points,
            'graded_at': self.graded_at.isoformat() if self.graded_at else None,
            'regraded_at': self.regraded_at.isoformat() if self.regraded_at else None,
        }


class VerdictRegrade(db.Model):
    """Audit row for one in-place verdict flip."""

    __tablename__ = 'verdict_regrades'

    regrade_id = db.Column(db.Integer, primary_key=True)
    verdict_id = db.Column(db.Integer, db.ForeignKey('answer_verdicts.verdict_id'), nullable=False, index=True)
    dispute_id = db.Column(db.Integer, db.ForeignKey('answer_disputes.dispute_id'), nullable=True)
    override_id = db.Column(db.Integer, db.ForeignKey('answer_overrides.override_id'), nullable=True)
    old_correct = db.Column(db.Boolean, nullable=False)
    new_correct = db.Column(db.Boolean, nullable=False)
    old_points = db.Column(db.Integer, nullable=False)
    new_points = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())


class CategoryProgress(db.Model):
    """Per (user, category) rollup, always derivable from the user's verdicts."""

    __tablename__ = 'category_progress'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.category_id'), nullable=False)
    correct = db.Column(db.Integer, default=0, nullable=False)
    total = db.Column(db.Integer, default=0, nullable=False)
    points = db.Column(db.Integer, default=0, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category = db.relationship('Category')

    __table_args__ = (db.UniqueConstraint('user_id', 'category_id', name='_user_category_progress_uc'),)

    def to_dict(self) -> dict[str, object]:
        return {
            'category_id': self.category_id,
            'category_name': self.category.name if self.category else None,
            'correct': self.correct,
            'total': self.total,
            'points': self.points,
        }

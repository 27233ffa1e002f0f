"""Live game sessions and their per-question slots."""

from __future__ import annotations

from sqlalchemy.sql import func

from ..db_instance import db


class Game(db.Model):
    """A live game owned by one user.

    ``current_score`` always equals the sum of ``points_awarded`` over the
    game's correct slots.
    """

    __tablename__ = 'games'

    game_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    current_score = db.Column(db.Integer, default=0, nullable=False)
    is_completed = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    user = db.relationship('User', backref=db.backref('games', lazy='dynamic'))
    slots = db.relationship(
        'GameQuestion',
        backref='game',
        cascade='all, delete-orphan',
        lazy=True,
    )

    def to_dict(self) -> dict[str, object]:
        return {
            'game_id': self.game_id,
            'user_id': self.user_id,
            'current_score': self.current_score,
            'is_completed': self.is_completed,
        }


class GameQuestion(db.Model):
    """One (game, question) slot. Answered at most once."""

    __tablename__ = 'game_questions'

    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('games.game_id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.question_id'), nullable=False)
    answered = db.Column(db.Boolean, default=False, nullable=False)
    correct = db.Column(db.Boolean, default=False, nullable=False)
    points_awarded = db.Column(db.Integer, default=0, nullable=False)

    question = db.relationship('Question')

    __table_args__ = (db.UniqueConstraint('game_id', 'question_id', name='_game_question_uc'),)

    def to_dict(self) -> dict[str, object]:
        return {
            'game_id': self.game_id,
            'question_id': self.question_id,
            'answered': self.answered,
            'correct': self.correct,
            'points_awarded': self.points_awarded,
        }

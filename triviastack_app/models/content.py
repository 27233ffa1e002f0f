"""Question content tables.

Rows are written by content ingestion; the grading engine only reads them.
"""

from __future__ import annotations

from sqlalchemy.sql import func

from ..db_instance import db


class Category(db.Model):
    """Mô hình chuyên mục câu hỏi."""

    __tablename__ = 'categories'

    category_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), unique=True, nullable=False)

    questions = db.relationship('Question', backref='category', lazy='dynamic')

    def __repr__(self):
        return f'<Category {self.name}>'


class Question(db.Model):
    """A clue with its canonical answer."""

    __tablename__ = 'questions'

    ROUND_SINGLE = 'SINGLE'
    ROUND_DOUBLE = 'DOUBLE'
    ROUND_FINAL = 'FINAL'

    question_id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.category_id'), nullable=False, index=True)
    clue = db.Column(db.Text, nullable=False, default='')
    answer = db.Column(db.Text, nullable=False)
    value = db.Column(db.Integer, nullable=True)  # face value, absent for some Final clues
    round = db.Column(db.String(10), default=ROUND_SINGLE, nullable=False)
    is_triple_stumper = db.Column(db.Boolean, default=False, nullable=False)
    air_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    overrides = db.relationship(
        'AnswerOverride',
        backref='question',
        cascade='all, delete-orphan',
        order_by='AnswerOverride.created_at',
        lazy=True,
    )

    def to_dict(self) -> dict[str, object]:
        return {
            'question_id': self.question_id,
            'category_id': self.category_id,
            'answer': self.answer,
            'value': self.value,
            'round': self.round,
            'is_triple_stumper': self.is_triple_stumper,
        }

    def __repr__(self):
        return f'<Question {self.question_id}>'

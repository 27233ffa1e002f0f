"""Database models package for TriviaStack."""

from ..db_instance import db

from .user import User
from .content import Category, Question
from .game import Game, GameQuestion
from .grading import AnswerOverride, AnswerVerdict, CategoryProgress, VerdictRegrade
from .dispute import AnswerDispute

__all__ = [
    'db',
    'User',
    'Category',
    'Question',
    'Game',
    'GameQuestion',
    'AnswerOverride',
    'AnswerVerdict',
    'CategoryProgress',
    'VerdictRegrade',
    'AnswerDispute',
]

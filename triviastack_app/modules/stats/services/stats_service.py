"""
Stats Service
Read-only views derived from CategoryProgress and the verdict history.
"""
from datetime import date
from typing import Optional

from sqlalchemy import func

from triviastack_app.extensions import db
from triviastack_app.models import AnswerVerdict, Category, CategoryProgress, Game
from triviastack_app.utils.time_utils import utcnow

from ..logics.streak_logic import streaks


class StatsService:

    @staticmethod
    def get_category_progress(user_id: int) -> list:
        rows = (
            CategoryProgress.query
            .join(Category, Category.category_id == CategoryProgress.category_id)
            .filter(CategoryProgress.user_id == user_id)
            .order_by(Category.name.asc())
            .all()
        )
        return [row.to_dict() for row in rows]

    @staticmethod
    def get_summary(user_id: int, today: Optional[date] = None) -> dict:
        """Tổng hợp điểm, độ chính xác và chuỗi ngày trả lời của người dùng."""
        correct, total, points = db.session.query(
            func.coalesce(func.sum(CategoryProgress.correct), 0),
            func.coalesce(func.sum(CategoryProgress.total), 0),
            func.coalesce(func.sum(CategoryProgress.points), 0),
        ).filter(CategoryProgress.user_id == user_id).one()

        answers = db.session.query(func.count(AnswerVerdict.verdict_id))\
            .filter(AnswerVerdict.user_id == user_id).scalar()
        games = db.session.query(func.count(Game.game_id)).filter(Game.user_id == user_id).scalar()

        graded = db.session.query(AnswerVerdict.graded_at).filter(AnswerVerdict.user_id == user_id).all()
        current, longest = streaks((row.graded_at for row in graded), today=today or utcnow().date())

        return {
            'correct': int(correct),
            'total': int(total),
            'points': int(points),
            'accuracy': round(correct / total, 4) if total else 0.0,
            'answers': answers,
            'games': games,
            'current_streak': current,
            'longest_streak': longest,
        }

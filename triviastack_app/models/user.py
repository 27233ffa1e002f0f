"""User model. Identity itself is resolved by the session collaborator."""

from __future__ import annotations

from flask_login import UserMixin
from sqlalchemy.sql import func

from ..db_instance import db


class User(UserMixin, db.Model):
    """Application user model."""

    __tablename__ = 'users'

    ROLE_ADMIN = 'admin'
    ROLE_USER = 'user'
    ROLE_LABELS = {
        ROLE_ADMIN: 'Administrator',
        ROLE_USER: 'Player',
    }

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    user_role = db.Column(db.String(50), default=ROLE_USER, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    def get_id(self):
        return str(self.user_id)

    @property
    def is_admin(self) -> bool:
        return self.user_role == self.ROLE_ADMIN

    def __repr__(self):
        return f'<User {self.username}>'

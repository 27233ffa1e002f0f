"""
Achievements collaborator hook.

The engine only asks "what did this unlock?" after a commit; evaluators live
elsewhere and connect to ``achievement_check``.
"""
from .interface import evaluate_achievements

__all__ = ['evaluate_achievements']

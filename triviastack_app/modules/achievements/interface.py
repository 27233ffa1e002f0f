from typing import Any, Dict, List, Optional

from flask import current_app

from triviastack_app.core.signals import achievement_check

EVENT_QUESTION_ANSWERED = 'question_answered'
EVENT_DISPUTE_APPROVED = 'dispute_approved'


def evaluate_achievements(user_id: int, event: str, payload: Optional[Dict[str, Any]] = None) -> List[str]:
    """
    Public API: run every connected achievement evaluator for one event.

    Returns the newly unlocked achievement identifiers. A failing evaluator is
    logged and skipped; nothing here can undo the grading that triggered it.
    """
    unlocked: List[str] = []
    payload = payload or {}

    for receiver in achievement_check.receivers_for(None):
        try:
            result = receiver(None, user_id=user_id, event=event, payload=payload)
        except Exception:
            current_app.logger.error(
                f"[Achievements] Evaluator {getattr(receiver, '__name__', receiver)} failed "
                f"for user {user_id} on {event}",
                exc_info=True,
            )
            continue

        if not result:
            continue
        if isinstance(result, str):
            result = [result]
        for achievement_id in result:
            if achievement_id not in unlocked:
                unlocked.append(achievement_id)

    return unlocked

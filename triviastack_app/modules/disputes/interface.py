"""Public API of the disputes module."""
from typing import Optional

from .services.dispute_service import DisputeService


def submit_dispute(user_id: int, question_id: int, raw_answer: str, game_id: Optional[int] = None) -> int:
    """Open a dispute; returns its id."""
    return DisputeService.submit_dispute(user_id, question_id, raw_answer, game_id).dispute_id


def approve_dispute(dispute_id: int, resolver_id: int, note: Optional[str] = None,
                    override_text: Optional[str] = None) -> dict:
    return DisputeService.approve_dispute(dispute_id, resolver_id, note, override_text)


def reject_dispute(dispute_id: int, resolver_id: int, note: Optional[str] = None) -> None:
    DisputeService.reject_dispute(dispute_id, resolver_id, note)


def count_pending() -> int:
    return DisputeService.count_pending()

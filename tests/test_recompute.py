"""
Tests for the Retroactive Recomputation Pass

Tests cover:
- Admin-curated overrides repairing every affected user
- Idempotence of a second pass
- Monotonicity: overrides never revoke acceptance
- No double award inside a scoring unit
- The context recorded at grading time is used for repaired points
"""

import pytest

from triviastack_app import db
from triviastack_app.core.error_handlers import AuthorizationError, NotFoundError, ValidationError
from triviastack_app.core.transactions import unit_of_work
from triviastack_app.models import (
    AnswerOverride,
    AnswerVerdict,
    CategoryProgress,
    Game,
    GameQuestion,
    Question,
    VerdictRegrade,
)
from triviastack_app.modules.disputes.services.dispute_service import DisputeService
from triviastack_app.modules.grading.services.grading_service import GradingService
from triviastack_app.modules.grading.services.override_service import OverrideService
from triviastack_app.modules.grading.services.recompute_service import RecomputeService


def _progress(user_id, category_id):
    row = CategoryProgress.query.filter_by(user_id=user_id, category_id=category_id).first()
    return (row.correct, row.total, row.points) if row else (0, 0, 0)


def _snapshot():
    verdicts = [(v.verdict_id, v.correct, v.points) for v in AnswerVerdict.query.order_by(AnswerVerdict.verdict_id)]
    progress = [(p.user_id, p.category_id, p.correct, p.total, p.points) for p in CategoryProgress.query.order_by(CategoryProgress.id)]
    scores = [(g.game_id, g.current_score) for g in Game.query.order_by(Game.game_id)]
    slots = [(s.id, s.correct, s.points_awarded) for s in GameQuestion.query.order_by(GameQuestion.id)]
    return verdicts, progress, scores, slots


class TestAdminOverride:

    def test_repairs_every_user_with_a_matching_answer(self, seeded):
        for user_id in (seeded['alice_id'], seeded['bob_id']):
            GradingService.grade(user_id, seeded['emperor_id'], 'PRACTICE', 'SINGLE', 'Bonaparte')
        GradingService.grade(seeded['bob_id'], seeded['revolution_id'], 'PRACTICE', 'DOUBLE', 'Bonaparte')

        result = OverrideService.add_admin_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'],
                                                    notes='Common short form')

        assert result['created'] is True
        assert result['users_recomputed'] == 2
        assert result['verdicts_flipped'] == 2
        assert result['override']['source'] == AnswerOverride.SOURCE_ADMIN
        assert _progress(seeded['alice_id'], seeded['history_id']) == (1, 1, 600)
        assert _progress(seeded['bob_id'], seeded['history_id']) == (1, 2, 600)

        other = AnswerVerdict.query.filter_by(question_id=seeded['revolution_id']).one()
        assert other.correct is False

    def test_non_matching_answers_stay_incorrect(self, seeded):
        GradingService.grade(seeded['alice_id'], seeded['emperor_id'], 'PRACTICE', 'SINGLE', 'Wellington')
        result = OverrideService.add_admin_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'])

        assert result['verdicts_flipped'] == 0
        assert AnswerVerdict.query.one().correct is False
        assert VerdictRegrade.query.count() == 0

    def test_existing_text_is_reused(self, seeded):
        OverrideService.add_admin_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'])
        again = OverrideService.add_admin_override(seeded['emperor_id'], 'the BONAPARTE', seeded['admin_id'])

        assert again['created'] is False
        assert again['users_recomputed'] == 0
        assert AnswerOverride.query.count() == 1

    def test_requires_admin(self, seeded):
        with pytest.raises(AuthorizationError):
            OverrideService.add_admin_override(seeded['emperor_id'], 'Bonaparte', seeded['alice_id'])
        assert AnswerOverride.query.count() == 0

    def test_unknown_question(self, seeded):
        with pytest.raises(NotFoundError):
            OverrideService.add_admin_override(987654, 'Bonaparte', seeded['admin_id'])

    def test_text_empty_after_normalization(self, seeded):
        with pytest.raises(ValidationError):
            OverrideService.add_admin_override(seeded['emperor_id'], '?!', seeded['admin_id'])

    def test_live_game_slot_is_repaired(self, seeded):
        game_id = seeded['game_id']
        GradingService.grade(seeded['alice_id'], seeded['emperor_id'], 'GAME', 'SINGLE', 'Bonaparte',
                             game_id=game_id, displayed_points=1200)
        GradingService.grade(seeded['alice_id'], seeded['emperor_id'], 'GAME', 'SINGLE', 'Bonaparte',
                             game_id=game_id, displayed_points=1200)

        OverrideService.add_admin_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'])

        first, second = AnswerVerdict.query.order_by(AnswerVerdict.verdict_id).all()
        assert (first.correct, first.points) == (True, 1200)
        assert (second.correct, second.points) == (True, 0)
        assert db.session.get(Game, game_id).current_score == 1200
        assert _progress(seeded['alice_id'], seeded['history_id']) == (1, 1, 1200)


class TestRecomputeProperties:

    def test_second_pass_is_a_no_op(self, seeded):
        GradingService.grade(seeded['alice_id'], seeded['emperor_id'], 'GAME', 'SINGLE', 'Napoleon Bonaparte',
                             game_id=seeded['game_id'], displayed_points=600)
        dispute = DisputeService.submit_dispute(seeded['alice_id'], seeded['emperor_id'], 'Napoleon Bonaparte',
                                                game_id=seeded['game_id'])
        DisputeService.approve_dispute(dispute.dispute_id, seeded['admin_id'], override_text='napoleon')
        before = _snapshot()
        regrades = VerdictRegrade.query.count()

        with unit_of_work('test_recompute'):
            result = RecomputeService.recompute(seeded['alice_id'], seeded['emperor_id'])

        assert result.flipped_verdict_ids == []
        assert result.points_delta == 0
        assert _snapshot() == before
        assert VerdictRegrade.query.count() == regrades

    def test_overrides_never_revoke_acceptance(self, seeded):
        GradingService.grade(seeded['alice_id'], seeded['emperor_id'], 'PRACTICE', 'SINGLE', 'Emperor Napoleon')
        GradingService.grade(seeded['bob_id'], seeded['emperor_id'], 'PRACTICE', 'SINGLE', 'Wellington')
        correct_before = {v.verdict_id for v in AnswerVerdict.query.filter_by(correct=True)}
        assert correct_before

        OverrideService.add_admin_override(seeded['emperor_id'], 'Josephine', seeded['admin_id'])
        OverrideService.add_admin_override(seeded['emperor_id'], 'Wellington', seeded['admin_id'])

        correct_after = {v.verdict_id for v in AnswerVerdict.query.filter_by(correct=True)}
        assert correct_before <= correct_after

    def test_no_double_award_in_a_practice_unit(self, seeded):
        """An early wrong answer flipped after a later right one earns nothing extra."""
        GradingService.grade(seeded['alice_id'], seeded['emperor_id'], 'PRACTICE', 'SINGLE', 'Bonaparte')
        GradingService.grade(seeded['alice_id'], seeded['emperor_id'], 'PRACTICE', 'SINGLE', 'Emperor Napoleon I')
        assert _progress(seeded['alice_id'], seeded['history_id']) == (1, 1, 600)

        OverrideService.add_admin_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'])

        first = AnswerVerdict.query.order_by(AnswerVerdict.verdict_id).first()
        assert (first.correct, first.points) == (True, 0)
        assert _progress(seeded['alice_id'], seeded['history_id']) == (1, 1, 600)

    def test_points_use_the_value_at_grading_time(self, seeded):
        GradingService.grade(seeded['alice_id'], seeded['emperor_id'], 'PRACTICE', 'SINGLE', 'Bonaparte')

        question = db.session.get(Question, seeded['emperor_id'])
        question.value = 1000
        db.session.commit()

        OverrideService.add_admin_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'])
        assert AnswerVerdict.query.one().points == 600

    def test_other_questions_are_untouched(self, seeded):
        GradingService.grade(seeded['alice_id'], seeded['emperor_id'], 'PRACTICE', 'SINGLE', 'Bonaparte')
        GradingService.grade(seeded['alice_id'], seeded['hamilton_id'], 'PRACTICE', 'FINAL', 'Bonaparte')

        with unit_of_work('test_recompute'):
            OverrideService.upsert_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'],
                                            AnswerOverride.SOURCE_ADMIN)
            result = RecomputeService.recompute(seeded['alice_id'], seeded['emperor_id'])

        assert len(result.flipped_verdict_ids) == 1
        hamilton = AnswerVerdict.query.filter_by(question_id=seeded['hamilton_id']).one()
        assert hamilton.correct is False
        assert _progress(seeded['alice_id'], seeded['history_id']) == (1, 2, 600)

"""
Tests for the Override Store

Overrides are stored normalized, unique per (question, text) and read fresh
on every call.
"""

import pytest

from triviastack_app.core.error_handlers import NotFoundError, ValidationError
from triviastack_app.core.transactions import unit_of_work
from triviastack_app.models import AnswerOverride
from triviastack_app.modules.grading.services.override_service import OverrideService


class TestUpsertOverride:

    def test_stores_normalized_text(self, seeded):
        with unit_of_work('test_override'):
            override, created = OverrideService.upsert_override(
                seeded['emperor_id'], '  "The Little Corporal" ', seeded['admin_id'], AnswerOverride.SOURCE_ADMIN
            )

        assert created is True
        assert override.text == 'little corporal'
        assert override.created_by_user_id == seeded['admin_id']

    def test_same_normalized_text_is_reused(self, seeded):
        with unit_of_work('test_override'):
            first, _ = OverrideService.upsert_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'],
                                                       AnswerOverride.SOURCE_ADMIN)
        with unit_of_work('test_override'):
            second, created = OverrideService.upsert_override(seeded['emperor_id'], 'bonaparte!', seeded['admin_id'],
                                                              AnswerOverride.SOURCE_DISPUTE)

        assert created is False
        assert second.override_id == first.override_id
        assert second.source == AnswerOverride.SOURCE_ADMIN

    def test_same_text_on_another_question_is_separate(self, seeded):
        with unit_of_work('test_override'):
            OverrideService.upsert_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'], AnswerOverride.SOURCE_ADMIN)
            OverrideService.upsert_override(seeded['hamilton_id'], 'Bonaparte', seeded['admin_id'], AnswerOverride.SOURCE_ADMIN)
        assert AnswerOverride.query.count() == 2

    def test_unknown_source(self, seeded):
        with pytest.raises(ValidationError):
            with unit_of_work('test_override'):
                OverrideService.upsert_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'], 'IMPORT')


class TestReadingOverrides:

    def test_override_texts_are_fresh(self, seeded):
        assert OverrideService.get_override_texts(seeded['emperor_id']) == frozenset()
        with unit_of_work('test_override'):
            OverrideService.upsert_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'], AnswerOverride.SOURCE_ADMIN)
        assert OverrideService.get_override_texts(seeded['emperor_id']) == frozenset({'bonaparte'})

    def test_list_overrides(self, seeded):
        with unit_of_work('test_override'):
            OverrideService.upsert_override(seeded['emperor_id'], 'Bonaparte', seeded['admin_id'], AnswerOverride.SOURCE_ADMIN)
            OverrideService.upsert_override(seeded['emperor_id'], 'Napoleon', seeded['admin_id'], AnswerOverride.SOURCE_ADMIN)

        texts = [o.text for o in OverrideService.list_overrides(seeded['emperor_id'])]
        assert texts == ['bonaparte', 'napoleon']

    def test_list_for_unknown_question(self, seeded):
        with pytest.raises(NotFoundError):
            OverrideService.list_overrides(555555)

"""
Tests for derived statistics

Tests cover:
- Answering streak logic (pure)
- Summary totals from CategoryProgress
- Per-category listing
"""

from datetime import date, datetime

from triviastack_app.modules.grading.services.grading_service import GradingService
from triviastack_app.modules.stats.logics.streak_logic import current_streak, longest_streak, streaks
from triviastack_app.modules.stats.services.stats_service import StatsService


class TestStreakLogic:

    def test_consecutive_days(self):
        days = [date(2024, 1, 3), date(2024, 1, 2), date(2024, 1, 1)]
        assert current_streak(days, today=date(2024, 1, 3)) == 3

    def test_gap_breaks_streak(self):
        days = [date(2024, 1, 3), date(2024, 1, 1)]
        assert current_streak(days, today=date(2024, 1, 3)) == 1

    def test_streak_survives_until_today_ends(self):
        days = [date(2024, 1, 2), date(2024, 1, 1)]
        assert current_streak(days, today=date(2024, 1, 3)) == 2
        assert current_streak(days, today=date(2024, 1, 4)) == 0

    def test_mixed_inputs(self):
        values = [datetime(2024, 1, 3, 23, 59), '2024-01-02', 'garbage', None, datetime(2024, 1, 3, 8, 0)]
        assert current_streak(values, today=date(2024, 1, 3)) == 2

    def test_longest(self):
        days = [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 10), date(2024, 1, 11)]
        assert longest_streak(days) == 3
        assert streaks(days, today=date(2024, 1, 11)) == (2, 3)

    def test_empty(self):
        assert streaks([]) == (0, 0)


class TestStatsService:

    def test_summary(self, seeded):
        GradingService.grade(seeded['alice_id'], seeded['nile_id'], 'PRACTICE', 'SINGLE', 'Nile')
        GradingService.grade(seeded['alice_id'], seeded['everest_id'], 'PRACTICE', 'SINGLE', 'K2')
        GradingService.grade(seeded['alice_id'], seeded['revolution_id'], 'GAME', 'DOUBLE', 'French Revolution',
                             game_id=seeded['game_id'], displayed_points=800)

        summary = StatsService.get_summary(seeded['alice_id'])

        assert summary['correct'] == 2
        assert summary['total'] == 3
        assert summary['points'] == 1000
        assert summary['accuracy'] == round(2 / 3, 4)
        assert summary['answers'] == 3
        assert summary['games'] == 1
        assert summary['current_streak'] == 1
        assert summary['longest_streak'] == 1

    def test_summary_for_new_user(self, seeded):
        summary = StatsService.get_summary(seeded['bob_id'])
        assert summary['total'] == 0
        assert summary['accuracy'] == 0.0
        assert summary['current_streak'] == 0

    def test_category_progress_sorted_by_name(self, seeded):
        GradingService.grade(seeded['alice_id'], seeded['nile_id'], 'PRACTICE', 'SINGLE', 'Nile')
        GradingService.grade(seeded['alice_id'], seeded['hamilton_id'], 'PRACTICE', 'FINAL', 'Hamilton')

        rows = StatsService.get_category_progress(seeded['alice_id'])

        assert [r['category_name'] for r in rows] == ['Geography', 'World History']
        assert rows[0]['points'] == 200
        assert rows[1]['correct'] == 0


class TestStatsInterface:

    def test_interface_matches_service(self, seeded):
        from triviastack_app.modules.stats import interface

        GradingService.grade(seeded['alice_id'], seeded['nile_id'], 'PRACTICE', 'SINGLE', 'Nile')
        assert interface.get_summary(seeded['alice_id'])['points'] == 200
        assert interface.get_category_progress(seeded['alice_id'])[0]['category_name'] == 'Geography'

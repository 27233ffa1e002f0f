from .services.stats_service import StatsService


def get_summary(user_id: int) -> dict:
    return StatsService.get_summary(user_id)


def get_category_progress(user_id: int) -> list:
    return StatsService.get_category_progress(user_id)

from flask import jsonify
from flask_login import current_user, login_required

from triviastack_app.core.error_handlers import success_response

from .. import stats_api_bp
from ..services.stats_service import StatsService


@stats_api_bp.route('/summary', methods=['GET'])
@login_required
def summary():
    """Tổng quan thống kê của người dùng hiện tại."""
    return jsonify(success_response(StatsService.get_summary(current_user.user_id)))


@stats_api_bp.route('/categories', methods=['GET'])
@login_required
def categories():
    return jsonify(success_response(StatsService.get_category_progress(current_user.user_id)))

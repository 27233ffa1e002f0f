from flask import jsonify
from flask_login import current_user, login_required

from triviastack_app.core.decorators import admin_required
from triviastack_app.core.error_handlers import success_response
from triviastack_app.utils.request_utils import load_json

from .. import grading_api_bp
from ..schemas import AdminOverrideSchema, GradeRequestSchema
from ..services.grading_service import GradingService
from ..services.override_service import OverrideService


@grading_api_bp.route('/answers/grade', methods=['POST'])
@login_required
def grade_answer():
    """Chấm một câu trả lời của người dùng hiện tại."""
    data = load_json(GradeRequestSchema)
    result = GradingService.grade(
        user_id=current_user.user_id,
        question_id=data['question_id'],
        mode=data['mode'],
        round=data['round'],
        raw_answer=data['answer'],
        game_id=data.get('game_id'),
        displayed_points=data.get('displayed_points'),
    )
    return jsonify(success_response(result.to_dict()))


@grading_api_bp.route('/admin/questions/<int:question_id>/overrides', methods=['GET'])
@login_required
@admin_required
def list_question_overrides(question_id):
    overrides = OverrideService.list_overrides(question_id)
    return jsonify(success_response([o.to_dict() for o in overrides]))


@grading_api_bp.route('/admin/questions/<int:question_id>/overrides', methods=['POST'])
@login_required
@admin_required
def add_question_override(question_id):
    """Admin thêm đáp án được chấp nhận và chấm lại lịch sử liên quan."""
    data = load_json(AdminOverrideSchema)
    result = OverrideService.add_admin_override(
        question_id, data['text'], current_user.user_id, data.get('notes')
    )
    return jsonify(success_response(result)), 201 if result['created'] else 200

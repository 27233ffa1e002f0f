from flask import jsonify
from flask_login import current_user, login_required

from triviastack_app.core.error_handlers import success_response
from triviastack_app.utils.request_utils import load_json

from .. import disputes_api_bp
from ..schemas import DisputeSubmitSchema
from ..services.dispute_service import DisputeService


@disputes_api_bp.route('/answers/disputes', methods=['POST'])
@login_required
def submit_dispute():
    """Người dùng gửi khiếu nại cho câu trả lời bị chấm sai."""
    data = load_json(DisputeSubmitSchema)
    dispute = DisputeService.submit_dispute(
        current_user.user_id, data['question_id'], data['answer'], data.get('game_id')
    )
    return jsonify(success_response(dispute.to_dict(), 'Dispute submitted')), 201


@disputes_api_bp.route('/games/<int:game_id>/approved-disputes', methods=['GET'])
@login_required
def approved_disputes_for_game(game_id):
    approved = DisputeService.get_approved_for_game(game_id, current_user.user_id)
    return jsonify(success_response(approved))

from flask import jsonify
from flask_login import current_user, login_required

from triviastack_app.core.decorators import admin_required
from triviastack_app.core.error_handlers import success_response
from triviastack_app.utils.request_utils import load_args, load_json

from .. import disputes_admin_api_bp
from ..schemas import DisputeListArgsSchema, DisputeResolveSchema
from ..services.dispute_service import DisputeService


@disputes_admin_api_bp.route('/disputes', methods=['GET'])
@login_required
@admin_required
def list_disputes():
    args = load_args(DisputeListArgsSchema)
    data = DisputeService.list_disputes(
        status=args.get('status'),
        mode=args.get('mode'),
        page=args['page'],
        per_page=args.get('page_size'),
    )
    return jsonify(success_response(data))


@disputes_admin_api_bp.route('/disputes/stats', methods=['GET'])
@login_required
@admin_required
def dispute_stats():
    return jsonify(success_response({'pending': DisputeService.count_pending()}))


@disputes_admin_api_bp.route('/disputes/<int:dispute_id>/approve', methods=['POST'])
@login_required
@admin_required
def approve_dispute(dispute_id):
    """Duyệt khiếu nại: thêm đáp án chấp nhận và chấm lại lịch sử của người dùng."""
    data = load_json(DisputeResolveSchema)
    result = DisputeService.approve_dispute(
        dispute_id, current_user.user_id, data.get('note'), data.get('override_text')
    )
    return jsonify(success_response(result, 'Dispute approved'))


@disputes_admin_api_bp.route('/disputes/<int:dispute_id>/reject', methods=['POST'])
@login_required
@admin_required
def reject_dispute(dispute_id):
    data = load_json(DisputeResolveSchema)
    dispute = DisputeService.reject_dispute(dispute_id, current_user.user_id, data.get('note'))
    return jsonify(success_response(dispute.to_dict(), 'Dispute rejected'))

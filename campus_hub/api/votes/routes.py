# campus_hub/api/votes/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from campus_hub.api.votes.schemas import VoteRequestSchema, VoteOutcomeSchema, VoteStateSchema, RecountRequestSchema
from campus_hub.core.permissions import permission_required, VOTE, MANAGE_USERS
from campus_hub.models.vote import VoteType, ItemType

votes_bp = Blueprint('votes_bp', __name__)

def _not_found():
    return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": "투표할 대상을 찾을 수 없습니다."}), 404

def _comment_belongs_to(question_id: str, comment_id: str) -> bool:
    comment = current_app.services['comments'].get_comment(comment_id)
    return comment is not None and comment.question_id == question_id

def _submit_vote(item_type: ItemType, item_id: str, question_id: str):
    """
    현재 상태를 읽고, 낙관적으로 계산한 상태를 저장소에 반영합니다.
    저장에 실패하면 503 과 함께 이전 상태(previous_state)를 돌려주어 클라이언트가 되돌릴 수 있게 합니다.
    """
    vote_service = current_app.services['votes']
    data = VoteRequestSchema().load(request.get_json() or {})
    user_id = get_jwt_identity()

    state = vote_service.get_state(item_type, item_id, user_id)
    if state is None:
        return _not_found()

    outcome = vote_service.submit(state, item_type, item_id, user_id, VoteType(data['vote_type']),
                                  question_id=question_id)
    if not outcome.ok:
        logging.warning(f"투표 반영 실패 ({item_type.value}: {item_id}): {outcome.error}")
    return jsonify(VoteOutcomeSchema().dump(outcome)), 200 if outcome.ok else 503

def _get_vote_state(item_type: ItemType, item_id: str):
    state = current_app.services['votes'].get_state(item_type, item_id, get_jwt_identity())
    if state is None:
        return _not_found()
    return jsonify(VoteStateSchema().dump(state)), 200

@votes_bp.route('/questions/<string:question_id>/vote', methods=['POST'])
@permission_required(VOTE)
def vote_question(question_id: str):
    """질문에 추천/비추천/취소(none) 투표를 합니다."""
    return _submit_vote(ItemType.QUESTION, question_id, question_id)

@votes_bp.route('/questions/<string:question_id>/vote', methods=['GET'])
@jwt_required()
def get_question_vote(question_id: str):
    return _get_vote_state(ItemType.QUESTION, question_id)

@votes_bp.route('/questions/<string:question_id>/comments/<string:comment_id>/vote', methods=['POST'])
@permission_required(VOTE)
def vote_comment(question_id: str, comment_id: str):
    """댓글에 추천/비추천/취소(none) 투표를 합니다."""
    if not _comment_belongs_to(question_id, comment_id):
        return _not_found()
    return _submit_vote(ItemType.COMMENT, comment_id, question_id)

@votes_bp.route('/questions/<string:question_id>/comments/<string:comment_id>/vote', methods=['GET'])
@jwt_required()
def get_comment_vote(question_id: str, comment_id: str):
    if not _comment_belongs_to(question_id, comment_id):
        return _not_found()
    return _get_vote_state(ItemType.COMMENT, comment_id)

@votes_bp.route('/admin/votes/recount', methods=['POST'])
@permission_required(MANAGE_USERS)
def recount_votes():
    """투표 원장으로부터 대상의 카운터를 다시 계산합니다."""
    data = RecountRequestSchema().load(request.get_json() or {})
    totals = current_app.services['votes'].recount(ItemType(data['item_type']), data['item_id'])
    return jsonify({"item_type": data['item_type'], "item_id": data['item_id'], **totals}), 200

# campus_hub/api/communities/routes.py
from flask import Blueprint, jsonify, current_app

from campus_hub.api.communities.schemas import CommunitySchema
from campus_hub.api.events.schemas import EventResponseSchema
from campus_hub.api.questions.schemas import QuestionResponseSchema
from campus_hub.models.community import COMMUNITIES, ALL_COMMUNITIES_ID, get_community

communities_bp = Blueprint('communities_bp', __name__)

# 커뮤니티 상세 화면에 보여줄 최근 질문/다가오는 이벤트 수
PREVIEW_SIZE = 3

@communities_bp.route('', methods=['GET'])
def list_communities():
    return jsonify({"communities": CommunitySchema(many=True).dump(COMMUNITIES)}), 200

@communities_bp.route('/<string:community_id>', methods=['GET'])
def get_community_detail(community_id: str):
    """커뮤니티 정보와 최근 질문, 다가오는 이벤트 미리보기를 함께 반환합니다."""
    community = get_community(community_id)
    if community is None:
        return jsonify({"error_code": "COMMUNITY_NOT_FOUND", "message": "존재하지 않는 커뮤니티입니다."}), 404

    questions = current_app.services['questions'].list_by_community(community_id)[:PREVIEW_SIZE]
    events = [e for e in current_app.services['events'].list_upcoming() if community_id in (ALL_COMMUNITIES_ID, e.community_id)]
    return jsonify({
        "community": CommunitySchema().dump(community),
        "recent_questions": QuestionResponseSchema(many=True).dump(questions),
        "upcoming_events": EventResponseSchema(many=True).dump(events[:PREVIEW_SIZE]),
    }), 200

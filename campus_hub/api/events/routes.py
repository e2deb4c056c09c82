# campus_hub/api/events/routes.py
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required

from campus_hub.api.events.schemas import EventCreateSchema, EventUpdateSchema, EventResponseSchema
from campus_hub.core.permissions import permission_required, current_user_profile, CREATE_EVENTS

events_bp = Blueprint('events_bp', __name__)

@events_bp.route('', methods=['POST'])
@permission_required(CREATE_EVENTS)
def create_event():
    """새 이벤트를 등록합니다 (create_events 권한 필요)."""
    data = EventCreateSchema().load(request.get_json() or {})
    event = current_app.services['events'].create_event(current_user_profile(), data)
    return jsonify(EventResponseSchema().dump(event)), 201

@events_bp.route('', methods=['GET'])
def list_events():
    community_id = request.args.get('community', None, type=str)
    events = current_app.services['events'].list_events(community_id)
    return jsonify({"events": EventResponseSchema(many=True).dump(events)}), 200

@events_bp.route('/upcoming', methods=['GET'])
def list_upcoming_events():
    """홈 화면의 다가오는 이벤트 목록."""
    limit = request.args.get('limit', None, type=int)
    events = current_app.services['events'].list_upcoming(limit=limit)
    return jsonify({"events": EventResponseSchema(many=True).dump(events)}), 200

@events_bp.route('/<string:event_id>', methods=['GET'])
def get_event(event_id: str):
    event = current_app.services['events'].get_event(event_id)
    if event is None:
        return jsonify({"error_code": "EVENT_NOT_FOUND", "message": "이벤트를 찾을 수 없습니다."}), 404
    return jsonify(EventResponseSchema().dump(event)), 200

@events_bp.route('/<string:event_id>', methods=['PATCH'])
@jwt_required()
def update_event(event_id: str):
    """이벤트를 수정합니다. 작성자 또는 manage_events 권한이 필요합니다."""
    profile = current_user_profile()
    if profile is None:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자 프로필을 찾을 수 없습니다."}), 401
    patch = EventUpdateSchema().load(request.get_json() or {})
    event = current_app.services['events'].update_event(event_id, profile, patch)
    return jsonify(EventResponseSchema().dump(event)), 200

@events_bp.route('/<string:event_id>', methods=['DELETE'])
@jwt_required()
def delete_event(event_id: str):
    profile = current_user_profile()
    if profile is None:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자 프로필을 찾을 수 없습니다."}), 401
    current_app.services['events'].delete_event(event_id, profile)
    return Response(status=204)

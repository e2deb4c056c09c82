# campus_hub/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required

from campus_hub.api.users.schemas import UserProfileResponseSchema, UserPublicResponseSchema, RoleUpdateSchema
from campus_hub.core.permissions import permission_required, current_user_profile, MANAGE_USERS

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_profile():
    """현재 로그인된 사용자의 프로필과 계산된 권한 목록을 조회합니다."""
    profile = current_user_profile()
    if profile is None:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자 프로필을 찾을 수 없습니다."}), 404
    return jsonify(UserProfileResponseSchema().dump(profile)), 200

@users_bp.route('/<string:uid>', methods=['GET'])
@jwt_required()
def get_user_profile(uid: str):
    """다른 사용자의 공개 프로필을 조회합니다."""
    profile = current_app.services['users'].get_profile(uid)
    if profile is None:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserPublicResponseSchema().dump(profile)), 200

# --- 관리자 전용 ---

@users_bp.route('', methods=['GET'])
@permission_required(MANAGE_USERS)
def list_users():
    users = current_app.services['users'].list_users()
    return jsonify({"users": UserProfileResponseSchema(many=True).dump(users)}), 200

@users_bp.route('/search', methods=['GET'])
@permission_required(MANAGE_USERS)
def search_user():
    """uid 또는 이메일로 사용자를 찾습니다."""
    term = request.args.get('q', '', type=str)
    profile = current_app.services['users'].search_user(term)
    if profile is None:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "일치하는 사용자가 없습니다."}), 404
    return jsonify(UserProfileResponseSchema().dump(profile)), 200

@users_bp.route('/<string:uid>/role', methods=['PATCH'])
@permission_required(MANAGE_USERS)
def update_user_role(uid: str):
    """사용자의 역할을 변경합니다. 권한은 역할로부터 계산되므로 role 만 저장됩니다."""
    data = RoleUpdateSchema().load(request.get_json() or {})
    updated = current_app.services['users'].update_role(uid, data['role'])
    logging.info(f"관리자 역할 변경 요청 처리 (target: {uid}, role: {data['role']})")
    return jsonify(UserProfileResponseSchema().dump(updated)), 200

# campus_hub/core/permissions.py
"""
역할(role) → 권한(capability) 매핑 테이블과 권한 확인 헬퍼.

사용자 문서에는 role 만 저장하고, 권한 목록은 읽을 때마다 이 테이블에서 계산합니다.
프로필이 없으면 항상 권한 없음(fail-closed)으로 처리합니다.
"""
from enum import Enum
from functools import wraps
from typing import Any, Optional, Tuple

from flask import current_app, g, jsonify
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request


class Role(Enum):
    """사용자 역할. 정의 순서가 곧 권한 순서입니다 (user < moderator < admin)."""
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        """문자열/Enum 값을 Role 로 변환합니다. 알 수 없는 값은 USER 로 취급합니다."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.USER

    @property
    def rank(self) -> int:
        return list(Role).index(self)


# --- Capability 이름 ---
READ_FORUMS = 'read_forums'
CREATE_QUESTIONS = 'create_questions'
VOTE = 'vote'
CREATE_EVENTS = 'create_events'
MANAGE_EVENTS = 'manage_events'
MODERATE_FORUMS = 'moderate_forums'
MANAGE_USERS = 'manage_users'
DELETE_CONTENT = 'delete_content'

_USER_PERMISSIONS = (READ_FORUMS, CREATE_QUESTIONS, VOTE)
_MODERATOR_PERMISSIONS = _USER_PERMISSIONS + (CREATE_EVENTS, MANAGE_EVENTS, MODERATE_FORUMS)
_ADMIN_PERMISSIONS = _MODERATOR_PERMISSIONS + (MANAGE_USERS, DELETE_CONTENT)

ROLE_PERMISSIONS = {
    Role.USER: _USER_PERMISSIONS,
    Role.MODERATOR: _MODERATOR_PERMISSIONS,
    Role.ADMIN: _ADMIN_PERMISSIONS,
}


def get_permissions_for_role(role: Any) -> Tuple[str, ...]:
    """역할에 해당하는 권한 목록을 반환합니다."""
    return ROLE_PERMISSIONS[Role.parse(role)]


def has_permission(profile: Optional[Any], capability: str) -> bool:
    if profile is None:
        return False
    return capability in (profile.permissions or ())


def is_moderator(profile: Optional[Any]) -> bool:
    if profile is None:
        return False
    return Role.parse(profile.role) in (Role.MODERATOR, Role.ADMIN)


def is_admin(profile: Optional[Any]) -> bool:
    if profile is None:
        return False
    return Role.parse(profile.role) is Role.ADMIN


def permission_required(capability: str):
    """
    JWT 인증 후, 요청자의 프로필에 capability 가 있는지 확인하는 라우트 데코레이터.
    - 토큰이 없거나 유효하지 않으면 flask-jwt-extended 가 401 을 반환합니다.
    - 프로필이 없으면 401, 권한이 없으면 403 을 반환합니다.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            profile = current_app.services['users'].get_profile(get_jwt_identity())
            if profile is None:
                return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자 프로필을 찾을 수 없습니다."}), 401
            g.current_user = profile
            if not has_permission(profile, capability):
                return jsonify({"error_code": "FORBIDDEN", "message": f"'{capability}' 권한이 필요합니다."}), 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def current_user_profile():
    """
    현재 요청자의 프로필. permission_required 를 거친 요청이면 g 에 저장된 값을 재사용합니다.
    토큰이 없거나 프로필이 없으면 None.
    """
    profile = g.get('current_user')
    if profile is None:
        uid = get_jwt_identity()
        profile = current_app.services['users'].get_profile(uid) if uid else None
        g.current_user = profile
    return profile

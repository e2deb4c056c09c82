# campus_hub/api/users/schemas.py
from marshmallow import Schema, fields, validate

from campus_hub.core.permissions import Role

class UserProfileResponseSchema(Schema):
    """
    로그인한 본인/관리자에게 반환하는 프로필 스키마.
    permissions 는 저장된 값이 아니라 role 로부터 계산된 값입니다.
    """
    uid = fields.Str(required=True, dump_only=True)
    email = fields.Str(allow_none=True)
    display_name = fields.Str(allow_none=True)
    photo_url = fields.Str(allow_none=True)
    role = fields.Str(required=True)
    permissions = fields.List(fields.Str())
    created_at = fields.DateTime()

class UserPublicResponseSchema(Schema):
    """
    GET /api/users/{uid}
    다른 사용자의 프로필을 응답할 때 사용하는 스키마. 이메일 등 민감한 정보는 제외합니다.
    """
    uid = fields.Str(required=True, dump_only=True)
    display_name = fields.Str(allow_none=True)
    photo_url = fields.Str(allow_none=True)
    role = fields.Str(required=True)

class RoleUpdateSchema(Schema):
    """PATCH /api/users/{uid}/role"""
    role = fields.Str(required=True, validate=validate.OneOf([r.value for r in Role]))

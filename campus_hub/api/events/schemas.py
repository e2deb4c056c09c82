# campus_hub/api/events/schemas.py
from marshmallow import Schema, fields, validate

from campus_hub.api.questions.schemas import AuthorSchema, POSTABLE_COMMUNITY_IDS

class EventCreateSchema(Schema):
    """POST /api/events 요청 본문의 유효성을 검사합니다."""
    title = fields.Str(required=True, validate=validate.Length(min=3, max=150))
    description = fields.Str(required=True, validate=validate.Length(min=10, max=5000))
    date_time = fields.DateTime(required=True)
    club_name = fields.Str(required=True, validate=validate.Length(min=2, max=100))
    community_id = fields.Str(required=True, validate=validate.OneOf(POSTABLE_COMMUNITY_IDS, error="존재하지 않는 커뮤니티입니다."))
    poster_image_url = fields.URL(load_default=None, allow_none=True)
    rsvp_link = fields.URL(load_default=None, allow_none=True)

class EventUpdateSchema(Schema):
    """PATCH /api/events/{event_id} 요청 본문. 전달된 필드만 수정합니다."""
    title = fields.Str(validate=validate.Length(min=3, max=150))
    description = fields.Str(validate=validate.Length(min=10, max=5000))
    date_time = fields.DateTime()
    club_name = fields.Str(validate=validate.Length(min=2, max=100))
    community_id = fields.Str(validate=validate.OneOf(POSTABLE_COMMUNITY_IDS))
    poster_image_url = fields.URL(allow_none=True)
    rsvp_link = fields.URL(allow_none=True)

class EventResponseSchema(Schema):
    """이벤트 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    event_id = fields.Str(dump_only=True)
    title = fields.Str(required=True)
    description = fields.Str(required=True)
    date_time = fields.DateTime(required=True)
    club_name = fields.Str(required=True)
    community_id = fields.Str(required=True)
    author = fields.Nested(AuthorSchema, required=True)
    poster_image_url = fields.Str(allow_none=True)
    rsvp_link = fields.Str(allow_none=True)
    rsvp_count = fields.Int()
    created_at = fields.DateTime()

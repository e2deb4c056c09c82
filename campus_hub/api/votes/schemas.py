# campus_hub/api/votes/schemas.py
from marshmallow import Schema, fields, validate

from campus_hub.models.vote import VoteType, ItemType

class VoteRequestSchema(Schema):
    """투표 요청. 'none' 은 기존 투표 취소입니다."""
    vote_type = fields.Str(required=True, validate=validate.OneOf([v.value for v in VoteType]))

class VoteStateSchema(Schema):
    vote = fields.Enum(VoteType, by_value=True)
    upvotes = fields.Int()
    downvotes = fields.Int()
    score = fields.Int()

class VoteOutcomeSchema(Schema):
    """
    투표 결과 응답.
    ok=False 이면 클라이언트는 previous_state 로 화면 상태를 되돌립니다.
    """
    ok = fields.Bool()
    changed = fields.Bool()
    state = fields.Nested(VoteStateSchema)
    previous_state = fields.Nested(VoteStateSchema)
    error = fields.Str(allow_none=True)

class RecountRequestSchema(Schema):
    item_type = fields.Str(required=True, validate=validate.OneOf([t.value for t in ItemType]))
    item_id = fields.Str(required=True, validate=validate.Length(min=1))

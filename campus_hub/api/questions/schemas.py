# campus_hub/api/questions/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from campus_hub.api.questions.services import QUESTION_SORTS
from campus_hub.models.community import COMMUNITIES, ALL_COMMUNITIES_ID

POSTABLE_COMMUNITY_IDS = [c.community_id for c in COMMUNITIES if c.community_id != ALL_COMMUNITIES_ID]

# --- 재사용을 위한 중첩 스키마 ---
class AuthorSchema(Schema):
    """질문/댓글/이벤트 응답에 포함될 작성자 정보 스키마."""
    uid = fields.Str(required=True)
    display_name = fields.Str(allow_none=True)
    photo_url = fields.Str(allow_none=True)

# --- API 요청/응답 스키마 ---

class QuestionCreateSchema(Schema):
    """POST /api/questions 요청 본문의 유효성을 검사합니다."""
    title = fields.Str(required=True, validate=validate.Length(min=5, max=200, error="제목은 5~200자 사이여야 합니다."))
    content = fields.Str(required=True, validate=validate.Length(min=10, max=10000, error="본문은 10~10000자 사이여야 합니다."))
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=30)), load_default=list,
                       validate=validate.Length(max=5, error="태그는 최대 5개까지 추가할 수 있습니다."))
    community_id = fields.Str(required=True, validate=validate.OneOf(POSTABLE_COMMUNITY_IDS, error="존재하지 않는 커뮤니티입니다."))

class QuestionUpdateSchema(Schema):
    """PATCH /api/questions/{question_id} 요청 본문. 전달된 필드만 수정합니다."""
    title = fields.Str(validate=validate.Length(min=5, max=200))
    content = fields.Str(validate=validate.Length(min=10, max=10000))
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=30)), validate=validate.Length(max=5))

class QuestionListQuerySchema(Schema):
    """GET /api/questions 쿼리 파라미터"""
    class Meta:
        unknown = EXCLUDE

    community = fields.Str(load_default=None)
    tag = fields.Str(load_default=None)
    sort = fields.Str(load_default='recent', validate=validate.OneOf(QUESTION_SORTS))

class QuestionResponseSchema(Schema):
    """질문 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    question_id = fields.Str(dump_only=True)
    title = fields.Str(required=True)
    content = fields.Str(required=True)
    tags = fields.List(fields.Str())
    author = fields.Nested(AuthorSchema, required=True)
    community_id = fields.Str(required=True)
    upvotes = fields.Int(required=True)
    downvotes = fields.Int(required=True)
    views = fields.Int(required=True)
    reply_count = fields.Int(required=True)
    created_at = fields.DateTime(required=True)
    last_activity_at = fields.DateTime(allow_none=True)

    # 라우트에서 채워주는 응답 전용 필드
    my_vote = fields.Str(dump_only=True, dump_default='none')

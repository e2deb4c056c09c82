# campus_hub/api/comments/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE

from campus_hub.api.questions.schemas import AuthorSchema # 작성자 정보는 질문 스키마의 것을 재사용

class CommentCreateSchema(Schema):
    """
    POST /api/questions/{question_id}/comments
    댓글(답글) 생성 요청의 데이터 형식을 정의하고 유효성을 검사합니다.
    """
    content = fields.Str(required=True, validate=validate.Length(min=1, max=5000, error="댓글은 1~5000자 사이여야 합니다."))
    parent_id = fields.Str(load_default=None, allow_none=True)

    @validates_schema
    def validate_content(self, data, **kwargs):
        if not data["content"].strip():
            raise ValidationError("공백만으로 된 댓글은 작성할 수 없습니다.", "content")

class CommentThreadQuerySchema(Schema):
    """GET /api/questions/{question_id}/comments 쿼리 파라미터"""
    class Meta:
        unknown = EXCLUDE

    # 알 수 없는 정렬 값은 CommentSort.parse 에서 기본값으로 처리합니다.
    sort = fields.Str(load_default=None)
    q = fields.Str(load_default=None)

class CommentResponseSchema(Schema):
    """댓글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    comment_id = fields.Str(required=True)
    question_id = fields.Str(required=True)
    parent_id = fields.Str(allow_none=True)
    author = fields.Nested(AuthorSchema, required=True)
    content = fields.Str(required=True)
    upvotes = fields.Int(required=True)
    downvotes = fields.Int(required=True)
    created_at = fields.DateTime(required=True)

    # 라우트에서 채워주는 응답 전용 필드
    my_vote = fields.Str(dump_only=True, dump_default='none')

class CommentThreadSchema(CommentResponseSchema):
    """
    스레드 노드 하나의 응답 형식.
    replies 는 라우트에서 트리를 순회하며 채우므로 이 스키마는 자기 자신을 중첩하지 않습니다.
    """
    depth = fields.Int(required=True)
    display_depth = fields.Int(required=True)

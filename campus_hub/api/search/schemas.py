# campus_hub/api/search/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

class SearchQuerySchema(Schema):
    """GET /api/search 쿼리 파라미터"""
    class Meta:
        unknown = EXCLUDE

    q = fields.Str(required=True)
    community = fields.Str(load_default=None)
    max_results = fields.Int(load_default=20, validate=validate.Range(min=1, max=50))
    include_questions = fields.Bool(load_default=True)
    include_events = fields.Bool(load_default=True)
    include_communities = fields.Bool(load_default=True)

class SearchResultSchema(Schema):
    type = fields.Str()
    id = fields.Str()
    title = fields.Str()
    content = fields.Str()
    url = fields.Str()
    community = fields.Str(allow_none=True)
    tags = fields.List(fields.Str())
    metadata = fields.Dict()

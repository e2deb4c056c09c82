# campus_hub/api/communities/schemas.py
from marshmallow import Schema, fields

class CommunitySchema(Schema):
    community_id = fields.Str(required=True)
    name = fields.Str(required=True)
    description = fields.Str()

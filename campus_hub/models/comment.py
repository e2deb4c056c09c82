# campus_hub/models/comment.py
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Optional, Dict, Any

from campus_hub.models.user import Author
from campus_hub.utils.datetime_utils import DateTimeUtils

@dataclass
class Comment:
    """
    Firestore 'comments' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    - parent_id 가 None 이면 최상위 댓글입니다.
    - upvotes/downvotes 는 투표 원장(VoteService)의 카운터 갱신으로만 변경됩니다.
    """
    comment_id: str
    question_id: str
    author: Author
    content: str
    parent_id: Optional[str] = None
    upvotes: int = 0
    downvotes: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in DateTimeUtils.from_firestore(data).items() if k in known}
        author = values.get('author') or {}
        if isinstance(author, dict):
            values['author'] = Author(
                uid=author.get('uid', ''),
                display_name=author.get('display_name'),
                photo_url=author.get('photo_url'),
            )
        values['parent_id'] = values.get('parent_id') or None
        values['upvotes'] = values.get('upvotes') or 0
        values['downvotes'] = values.get('downvotes') or 0
        # 과거 문서에는 created_at 이 문자열로 저장된 경우가 있습니다.
        values['created_at'] = DateTimeUtils.coerce(values.get('created_at'))
        return cls(**values)

# campus_hub/models/question.py
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import List, Dict, Any

from campus_hub.models.user import Author
from campus_hub.utils.datetime_utils import DateTimeUtils

@dataclass
class Question:
    """
    Firestore 'questions' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    카운터(upvotes, downvotes, views, reply_count)는 Increment 로만 갱신합니다.
    """
    question_id: str
    title: str
    content: str
    author: Author
    community_id: str
    tags: List[str] = field(default_factory=list)
    upvotes: int = 0
    downvotes: int = 0
    views: int = 0
    reply_count: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    last_activity_at: datetime = field(default_factory=DateTimeUtils.now)

    @property
    def score(self) -> int:
        return self.upvotes - self.downvotes

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in DateTimeUtils.from_firestore(data).items() if k in known}
        author = values.get('author') or {}
        if isinstance(author, dict):
            values['author'] = Author(**{k: author.get(k) for k in ('uid', 'display_name', 'photo_url')})
        for counter in ('upvotes', 'downvotes', 'views', 'reply_count'):
            values[counter] = values.get(counter) or 0
        values['tags'] = values.get('tags') or []
        for key in ('created_at', 'last_activity_at'):
            values[key] = DateTimeUtils.coerce(values.get(key))
        return cls(**values)

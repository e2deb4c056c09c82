# campus_hub/models/event.py
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Optional, Dict, Any

from campus_hub.models.user import Author
from campus_hub.utils.datetime_utils import DateTimeUtils

@dataclass
class Event:
    """
    Firestore 'events' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    event_id: str
    title: str
    description: str
    date_time: datetime
    club_name: str
    community_id: str
    author: Author
    poster_image_url: Optional[str] = None
    rsvp_link: Optional[str] = None
    rsvp_count: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in DateTimeUtils.from_firestore(data).items() if k in known}
        author = values.get('author') or {}
        if isinstance(author, dict):
            values['author'] = Author(**{k: author.get(k) for k in ('uid', 'display_name', 'photo_url')})
        # 초기 데이터는 date_time 을 ISO 문자열로 저장했습니다.
        values['date_time'] = DateTimeUtils.coerce(values.get('date_time'))
        values['rsvp_count'] = values.get('rsvp_count') or 0
        return cls(**values)

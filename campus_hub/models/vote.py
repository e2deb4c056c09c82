# campus_hub/models/vote.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from campus_hub.utils.datetime_utils import DateTimeUtils

class VoteType(Enum):
    """투표 상태. 기록이 없는 것은 NONE 과 같습니다."""
    UP = "up"
    DOWN = "down"
    NONE = "none"

class ItemType(Enum):
    """투표 대상 유형"""
    QUESTION = "question"
    COMMENT = "comment"

@dataclass
class Vote:
    """
    Firestore 'votes' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    (item_type, item_id, user_id) 당 하나의 문서만 존재하며, 재투표 시 덮어씁니다.
    """
    item_type: ItemType
    item_id: str
    user_id: str
    vote_type: VoteType
    question_id: Optional[str] = None
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @property
    def vote_id(self) -> str:
        return vote_document_id(self.item_type, self.item_id, self.user_id)

def vote_document_id(item_type: ItemType, item_id: str, user_id: str) -> str:
    return f"{item_type.value}_{item_id}_{user_id}"

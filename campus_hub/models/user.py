# campus_hub/models/user.py
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Optional, Tuple, Dict, Any

from campus_hub.core.permissions import Role, get_permissions_for_role
from campus_hub.utils.datetime_utils import DateTimeUtils

@dataclass
class Author:
    """질문/댓글/이벤트 문서 내부에 비정규화되어 저장되는 작성자 정보."""
    uid: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None

@dataclass
class UserProfile:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    - 문서에는 role 만 저장합니다. permissions 는 role 로부터 계산됩니다.
    """
    uid: str
    email: Optional[str]
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    role: str = Role.USER.value
    google_id: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @property
    def permissions(self) -> Tuple[str, ...]:
        return get_permissions_for_role(self.role)

    def to_author(self) -> Author:
        return Author(uid=self.uid, display_name=self.display_name, photo_url=self.photo_url)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        """
        Firestore 문서로부터 프로필을 생성합니다.
        과거 문서에 남아 있는 'permissions' 배열 등 알 수 없는 필드는 무시합니다.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in DateTimeUtils.from_firestore(data).items() if k in known}
        values['role'] = Role.parse(values.get('role')).value
        return cls(**values)

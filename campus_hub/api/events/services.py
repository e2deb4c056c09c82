# campus_hub/api/events/services.py
import logging
import uuid
from dataclasses import asdict
from datetime import datetime
from typing import Optional, Dict, Any, List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from campus_hub.core.exceptions import NotFoundError, ForbiddenError, store_errors
from campus_hub.core.permissions import has_permission, MANAGE_EVENTS
from campus_hub.models.community import ALL_COMMUNITIES_ID
from campus_hub.models.event import Event
from campus_hub.models.user import UserProfile
from campus_hub.utils.datetime_utils import DateTimeUtils, EPOCH

_EDITABLE_FIELDS = ('title', 'description', 'date_time', 'club_name', 'community_id', 'poster_image_url', 'rsvp_link')

class EventService:
    """
    이벤트 게시판 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 생성은 create_events 권한(라우트에서 확인), 수정/삭제는 작성자 또는 manage_events 권한이 필요합니다.
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.events_ref = self.db.collection('events')

    def create_event(self, author: UserProfile, data: Dict[str, Any]) -> Event:
        event = Event(
            event_id=str(uuid.uuid4()),
            title=data['title'].strip(),
            description=data['description'].strip(),
            date_time=DateTimeUtils.coerce(data['date_time']),
            club_name=data['club_name'].strip(),
            community_id=data['community_id'],
            author=author.to_author(),
            poster_image_url=data.get('poster_image_url'),
            rsvp_link=data.get('rsvp_link'),
        )
        with store_errors("이벤트를 저장하지 못했습니다"):
            self.events_ref.document(event.event_id).set(DateTimeUtils.for_firestore(asdict(event)))
        logging.info(f"이벤트 생성 (event_id: {event.event_id}, club: {event.club_name})")
        return event

    def get_event(self, event_id: str) -> Optional[Event]:
        with store_errors("이벤트를 불러오지 못했습니다"):
            doc = self.events_ref.document(event_id).get()
        return Event.from_dict(doc.to_dict()) if doc.exists else None

    def list_events(self, community_id: Optional[str] = None) -> List[Event]:
        """이벤트 목록을 일정 순으로 반환합니다. 'all' 은 전체 커뮤니티입니다."""
        query = self.events_ref
        if community_id and community_id != ALL_COMMUNITIES_ID:
            query = query.where(filter=FieldFilter('community_id', '==', community_id))
        with store_errors("이벤트 목록을 불러오지 못했습니다"):
            events = [Event.from_dict(doc.to_dict()) for doc in query.stream()]
        return sorted(events, key=lambda e: e.date_time or EPOCH)

    def list_all(self) -> List[Event]:
        return self.list_events()

    def list_by_community(self, community_id: str) -> List[Event]:
        return self.list_events(community_id)

    def list_upcoming(self, now: Optional[datetime] = None, limit: Optional[int] = None) -> List[Event]:
        """홈 화면용. 아직 시작하지 않은 이벤트를 가까운 순으로 반환합니다."""
        now = now or DateTimeUtils.now()
        upcoming = [e for e in self.list_events() if e.date_time and e.date_time >= now]
        return upcoming[:limit] if limit else upcoming

    def _get_manageable(self, event_id: str, user: UserProfile):
        event_ref = self.events_ref.document(event_id)
        with store_errors("이벤트를 불러오지 못했습니다"):
            doc = event_ref.get()
        if not doc.exists:
            raise NotFoundError("이벤트를 찾을 수 없습니다.")
        event = Event.from_dict(doc.to_dict())
        if event.author.uid != user.uid and not has_permission(user, MANAGE_EVENTS):
            raise ForbiddenError("이벤트를 관리할 권한이 없습니다.")
        return event_ref, event

    def update_event(self, event_id: str, user: UserProfile, patch: Dict[str, Any]) -> Event:
        event_ref, _ = self._get_manageable(event_id, user)
        update_data = {k: v for k, v in patch.items() if k in _EDITABLE_FIELDS}
        if 'date_time' in update_data:
            update_data['date_time'] = DateTimeUtils.coerce(update_data['date_time'])
        if update_data:
            with store_errors("이벤트를 수정하지 못했습니다"):
                event_ref.update(DateTimeUtils.for_firestore(update_data))
        with store_errors("이벤트를 불러오지 못했습니다"):
            doc = event_ref.get()
        return Event.from_dict(doc.to_dict())

    def delete_event(self, event_id: str, user: UserProfile) -> None:
        event_ref, _ = self._get_manageable(event_id, user)
        with store_errors("이벤트를 삭제하지 못했습니다"):
            event_ref.delete()
        logging.info(f"이벤트 삭제 (event_id: {event_id}, by: {user.uid})")

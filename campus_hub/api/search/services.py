# campus_hub/api/search/services.py
import math
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from campus_hub.api.events.services import EventService
from campus_hub.api.questions.services import QuestionService
from campus_hub.models.community import COMMUNITIES, ALL_COMMUNITIES_ID, get_community
from campus_hub.utils.datetime_utils import DateTimeUtils

MIN_TERM_LENGTH = 2
SNIPPET_LENGTH = 150
# 로컬 필터링 전에 가져오는 최근 문서 수
QUESTION_SCAN_LIMIT = 50
EVENT_SCAN_LIMIT = 30

@dataclass
class SearchResult:
    type: str  # 'question' | 'event' | 'community'
    id: str
    title: str
    content: str
    url: str
    community: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

def _snippet(text: str) -> str:
    text = text or ''
    return text[:SNIPPET_LENGTH] + ('...' if len(text) > SNIPPET_LENGTH else '')

def _community_name(community_id: str) -> Optional[str]:
    community = get_community(community_id)
    return community.name if community else None

class SearchService:
    """
    질문/이벤트/커뮤니티 통합 검색.
    Firestore 는 부분 문자열 검색을 지원하지 않으므로 최근 문서를 가져와 메모리에서 필터링합니다.
    """
    def __init__(self, question_service: QuestionService, event_service: EventService):
        self.question_service = question_service
        self.event_service = event_service

    def search_all(self, term: str, include_questions: bool = True, include_events: bool = True,
                   include_communities: bool = True, max_results: int = 20,
                   community_id: Optional[str] = None) -> List[SearchResult]:
        if not term or len(term.strip()) < MIN_TERM_LENGTH:
            return []
        needle = term.strip().lower()
        if community_id == ALL_COMMUNITIES_ID:
            community_id = None

        results: List[SearchResult] = []
        if include_questions:
            results.extend(self.search_questions(needle, community_id, math.ceil(max_results * 0.6)))
        if include_events:
            results.extend(self.search_events(needle, community_id, math.ceil(max_results * 0.3)))
        if include_communities and not community_id:
            results.extend(self.search_communities(needle, math.ceil(max_results * 0.1)))

        # 제목에 검색어가 포함된 결과를 먼저 보여줍니다 (그 외 순서는 유지).
        results.sort(key=lambda r: needle not in r.title.lower())
        return results[:max_results]

    def quick_search(self, term: str, max_results: int = 8) -> List[SearchResult]:
        return self.search_all(term, max_results=max_results)

    def search_questions(self, needle: str, community_id: Optional[str], max_results: int) -> List[SearchResult]:
        questions = self.question_service.list_questions(community_id=community_id)[:QUESTION_SCAN_LIMIT]
        matched = [
            q for q in questions
            if needle in q.title.lower() or needle in q.content.lower() or any(needle in t for t in q.tags)
        ]
        return [
            SearchResult(
                type='question', id=q.question_id, title=q.title, content=_snippet(q.content),
                url=f"/qna/{q.question_id}", community=_community_name(q.community_id), tags=list(q.tags),
                metadata={
                    'author': q.author.display_name,
                    'upvotes': q.upvotes,
                    'reply_count': q.reply_count,
                    'created_at': DateTimeUtils.to_iso_string(q.created_at),
                },
            )
            for q in matched[:max_results]
        ]

    def search_events(self, needle: str, community_id: Optional[str], max_results: int) -> List[SearchResult]:
        events = list(reversed(self.event_service.list_events(community_id)))[:EVENT_SCAN_LIMIT]
        matched = [
            e for e in events
            if needle in e.title.lower() or needle in e.description.lower() or needle in e.club_name.lower()
        ]
        return [
            SearchResult(
                type='event', id=e.event_id, title=e.title, content=_snippet(e.description),
                url=f"/events/{e.event_id}", community=_community_name(e.community_id),
                metadata={
                    'club_name': e.club_name,
                    'date_time': DateTimeUtils.to_iso_string(e.date_time) if e.date_time else None,
                    'rsvp_count': e.rsvp_count,
                },
            )
            for e in matched[:max_results]
        ]

    @staticmethod
    def search_communities(needle: str, max_results: int) -> List[SearchResult]:
        matched = [
            c for c in COMMUNITIES
            if c.community_id != ALL_COMMUNITIES_ID and (needle in c.name.lower() or needle in c.description.lower())
        ]
        return [
            SearchResult(type='community', id=c.community_id, title=c.name, content=c.description,
                         url=f"/community/{c.community_id}")
            for c in matched[:max_results]
        ]

# campus_hub/api/questions/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from campus_hub.api.votes.services import VoteService
from campus_hub.core.exceptions import NotFoundError, ForbiddenError, store_errors
from campus_hub.core.permissions import has_permission, DELETE_CONTENT
from campus_hub.models.community import ALL_COMMUNITIES_ID
from campus_hub.models.question import Question
from campus_hub.models.user import UserProfile
from campus_hub.utils.datetime_utils import DateTimeUtils, EPOCH

QUESTION_SORTS = ('recent', 'popular', 'unanswered')

def normalize_tags(tags: Optional[List[str]]) -> List[str]:
    """태그를 소문자로 정리하고 중복을 제거합니다 (입력 순서 유지)."""
    normalized = []
    for tag in tags or []:
        tag = tag.strip().lower()
        if tag and tag not in normalized:
            normalized.append(tag)
    return normalized

def sort_questions(questions: List[Question], sort: str = 'recent') -> List[Question]:
    """
    질문 목록 정렬.
    - recent: 최신순
    - popular: (upvotes - downvotes) 내림차순
    - unanswered: 답글 수 오름차순, 같으면 최신순
    """
    by_recent = sorted(questions, key=lambda q: q.created_at or EPOCH, reverse=True)
    if sort == 'popular':
        return sorted(by_recent, key=lambda q: -q.score)
    if sort == 'unanswered':
        return sorted(by_recent, key=lambda q: q.reply_count)
    return by_recent

class QuestionService:
    """
    Q&A 질문 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 카운터(views, reply_count)는 firestore.Increment 로만 변경합니다.
    """
    def __init__(self, vote_service: VoteService, db=None):
        self.db = db or firestore.client()
        self.questions_ref = self.db.collection('questions')
        self.comments_ref = self.db.collection('comments')
        self.vote_service = vote_service

    def create_question(self, author: UserProfile, data: Dict[str, Any]) -> Question:
        """새 질문을 생성합니다. 권한 확인은 라우트의 permission_required 가 담당합니다."""
        question = Question(
            question_id=str(uuid.uuid4()),
            title=data['title'].strip(),
            content=data['content'].strip(),
            author=author.to_author(),
            community_id=data['community_id'],
            tags=normalize_tags(data.get('tags')),
        )
        with store_errors("질문을 저장하지 못했습니다"):
            self.questions_ref.document(question.question_id).set(DateTimeUtils.for_firestore(asdict(question)))
        logging.info(f"질문 생성 (question_id: {question.question_id}, community: {question.community_id})")
        return question

    def get_question(self, question_id: str, count_view: bool = True) -> Optional[Question]:
        """
        질문을 조회합니다. 없으면 None.
        count_view=True 이면 조회수를 1 증가시킵니다.
        """
        question_ref = self.questions_ref.document(question_id)
        with store_errors("질문을 불러오지 못했습니다"):
            doc = question_ref.get()
        if not doc.exists:
            return None
        question = Question.from_dict(doc.to_dict())
        if count_view:
            with store_errors("조회수를 갱신하지 못했습니다"):
                question_ref.update({'views': firestore.Increment(1)})
            question.views += 1
        return question

    def list_questions(self, community_id: Optional[str] = None, tag: Optional[str] = None,
                       author_uid: Optional[str] = None, sort: str = 'recent') -> List[Question]:
        """커뮤니티/태그/작성자 조건으로 질문 목록을 조회합니다. 'all' 은 전체 커뮤니티입니다."""
        query = self.questions_ref
        if community_id and community_id != ALL_COMMUNITIES_ID:
            query = query.where(filter=FieldFilter('community_id', '==', community_id))
        if author_uid:
            query = query.where(filter=FieldFilter('author.uid', '==', author_uid))
        if tag:
            query = query.where(filter=FieldFilter('tags', 'array_contains', tag.strip().lower()))
        with store_errors("질문 목록을 불러오지 못했습니다"):
            questions = [Question.from_dict(doc.to_dict()) for doc in query.stream()]
        return sort_questions(questions, sort)

    def list_all(self, sort: str = 'recent') -> List[Question]:
        return self.list_questions(sort=sort)

    def list_by_community(self, community_id: str) -> List[Question]:
        return self.list_questions(community_id=community_id)

    def list_by_author(self, uid: str) -> List[Question]:
        """내가 작성한 질문 (My Forums)."""
        return self.list_questions(author_uid=uid)

    def _get_owned(self, question_id: str, user: UserProfile, allow_capability: Optional[str] = None):
        question_ref = self.questions_ref.document(question_id)
        with store_errors("질문을 불러오지 못했습니다"):
            doc = question_ref.get()
        if not doc.exists:
            raise NotFoundError("질문을 찾을 수 없습니다.")
        question = Question.from_dict(doc.to_dict())
        is_owner = question.author.uid == user.uid
        if not is_owner and not (allow_capability and has_permission(user, allow_capability)):
            raise ForbiddenError("질문 작성자만 이 작업을 할 수 있습니다.")
        return question_ref, question

    def update_question(self, question_id: str, user: UserProfile, patch: Dict[str, Any]) -> Question:
        """제목/본문/태그 중 전달된 필드만 수정합니다 (작성자 본인만 가능)."""
        question_ref, _ = self._get_owned(question_id, user)
        update_data = {}
        for key in ('title', 'content'):
            if key in patch:
                update_data[key] = patch[key].strip()
        if 'tags' in patch:
            update_data['tags'] = normalize_tags(patch['tags'])
        if update_data:
            update_data['last_activity_at'] = DateTimeUtils.now()
            with store_errors("질문을 수정하지 못했습니다"):
                question_ref.update(update_data)
        with store_errors("질문을 불러오지 못했습니다"):
            doc = question_ref.get()
        return Question.from_dict(doc.to_dict())

    def delete_question(self, question_id: str, user: UserProfile) -> None:
        """
        질문을 삭제합니다. 작성자 또는 delete_content 권한이 있는 사용자만 가능합니다.
        질문에 달린 댓글과 투표 기록도 함께 삭제합니다.
        """
        question_ref, _ = self._get_owned(question_id, user, allow_capability=DELETE_CONTENT)
        with store_errors("질문을 삭제하지 못했습니다"):
            comment_docs = list(self.comments_ref.where(filter=FieldFilter('question_id', '==', question_id)).stream())
            for doc in comment_docs:
                doc.reference.delete()
            removed_votes = self.vote_service.delete_votes_for_question(question_id)
            question_ref.delete()
        logging.info(f"질문 삭제 (question_id: {question_id}, 댓글 {len(comment_docs)}개, 투표 {removed_votes}개)")

    def on_new_comment(self, question_id: str) -> None:
        """댓글이 작성되면 답글 수를 늘리고 마지막 활동 시각을 갱신합니다."""
        with store_errors("질문의 답글 수를 갱신하지 못했습니다"):
            self.questions_ref.document(question_id).update({
                'reply_count': firestore.Increment(1),
                'last_activity_at': DateTimeUtils.now(),
            })

    def on_comment_deleted(self, question_id: str) -> None:
        with store_errors("질문의 답글 수를 갱신하지 못했습니다"):
            self.questions_ref.document(question_id).update({'reply_count': firestore.Increment(-1)})

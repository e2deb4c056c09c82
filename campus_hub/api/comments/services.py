# campus_hub/api/comments/services.py

import logging
import uuid
from dataclasses import asdict
from typing import Optional, List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from campus_hub.api.comments.threads import CommentNode, CommentSort, prepare_thread
from campus_hub.api.questions.services import QuestionService
from campus_hub.api.votes.services import VoteService
from campus_hub.core.exceptions import NotFoundError, ForbiddenError, store_errors
from campus_hub.core.permissions import has_permission, DELETE_CONTENT, MODERATE_FORUMS
from campus_hub.models.comment import Comment
from campus_hub.models.user import UserProfile
from campus_hub.models.vote import ItemType
from campus_hub.utils.datetime_utils import DateTimeUtils

class CommentService:
    """
    댓글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 댓글은 'comments' 컬렉션에 question_id 필드와 함께 평탄하게 저장됩니다.
    - 스레드(트리) 구성은 조회 시점에 threads 모듈이 담당합니다.
    """
    def __init__(self, question_service: QuestionService, vote_service: VoteService, db=None):
        self.db = db or firestore.client()
        self.comments_ref = self.db.collection('comments')
        self.questions_ref = self.db.collection('questions')
        self.question_service = question_service
        self.vote_service = vote_service

    def add_comment(self, question_id: str, author: UserProfile, content: str, parent_id: Optional[str] = None) -> Comment:
        """
        새 댓글(또는 답글)을 작성합니다.
        - 질문이 없으면 NotFoundError.
        - 부모 댓글이 없거나 다른 질문의 댓글이면 최상위 댓글로 저장합니다.
        - 저장이 끝난 뒤 질문의 reply_count 와 last_activity_at 을 갱신합니다.
        """
        with store_errors("질문을 불러오지 못했습니다"):
            question_exists = self.questions_ref.document(question_id).get().exists
        if not question_exists:
            raise NotFoundError("댓글을 작성할 질문이 존재하지 않습니다.")

        if parent_id:
            with store_errors("부모 댓글을 불러오지 못했습니다"):
                parent_doc = self.comments_ref.document(parent_id).get()
            if not parent_doc.exists or parent_doc.to_dict().get('question_id') != question_id:
                logging.warning(f"유효하지 않은 부모 댓글 (question_id: {question_id}, parent_id: {parent_id}) - 최상위 댓글로 저장합니다.")
                parent_id = None

        comment = Comment(
            comment_id=str(uuid.uuid4()),
            question_id=question_id,
            author=author.to_author(),
            content=content.strip(),
            parent_id=parent_id or None,
        )
        with store_errors("댓글을 저장하지 못했습니다"):
            self.comments_ref.document(comment.comment_id).set(DateTimeUtils.for_firestore(asdict(comment)))

        self.question_service.on_new_comment(question_id)
        return comment

    def list_for_question(self, question_id: str) -> List[Comment]:
        """질문의 모든 댓글을 평탄한 목록으로 반환합니다. 순서는 작성 순입니다."""
        query = (self.comments_ref
                 .where(filter=FieldFilter('question_id', '==', question_id))
                 .order_by('created_at'))
        with store_errors("댓글 목록을 불러오지 못했습니다"):
            return [Comment.from_dict(doc.to_dict()) for doc in query.stream()]

    def get_thread(self, question_id: str, sort=CommentSort.TOP, query: Optional[str] = None) -> List[CommentNode]:
        """정렬과 검색 필터를 적용한 댓글 트리의 최상위 노드 목록을 반환합니다."""
        return prepare_thread(self.list_for_question(question_id), sort, query)

    def get_comment(self, comment_id: str) -> Optional[Comment]:
        with store_errors("댓글을 불러오지 못했습니다"):
            doc = self.comments_ref.document(comment_id).get()
        return Comment.from_dict(doc.to_dict()) if doc.exists else None

    def delete_comment(self, comment_id: str, user: UserProfile) -> Comment:
        """
        댓글을 삭제합니다. 작성자 본인 또는 포럼 관리 권한이 있는 사용자만 가능합니다.
        답글은 남겨 두며, 다음 조회부터 최상위 댓글로 표시됩니다.
        """
        comment = self.get_comment(comment_id)
        if comment is None:
            raise NotFoundError("삭제할 댓글이 없습니다.")
        is_owner = comment.author.uid == user.uid
        if not (is_owner or has_permission(user, MODERATE_FORUMS) or has_permission(user, DELETE_CONTENT)):
            raise ForbiddenError("댓글을 삭제할 권한이 없습니다.")

        with store_errors("댓글을 삭제하지 못했습니다"):
            self.comments_ref.document(comment_id).delete()
            self.vote_service.delete_votes_for_item(ItemType.COMMENT, comment_id)
        self.question_service.on_comment_deleted(comment.question_id)
        logging.info(f"댓글 삭제 (comment_id: {comment_id}, by: {user.uid})")
        return comment

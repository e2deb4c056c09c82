# campus_hub/api/votes/services.py
import logging
from dataclasses import asdict
from typing import Optional, Dict, List, Tuple

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from campus_hub.api.votes.ledger import VoteState, VoteOutcome, apply_vote, counter_updates
from campus_hub.core.exceptions import NotFoundError, PersistenceError, store_errors
from campus_hub.models.vote import Vote, VoteType, ItemType, vote_document_id
from campus_hub.utils.datetime_utils import DateTimeUtils

class VoteService:
    """
    질문/댓글 투표 원장(ledger)을 관리하는 서비스 클래스.
    - 'votes' 컬렉션에 (대상 유형, 대상 ID, 사용자) 당 하나의 투표 문서를 유지합니다.
    - 대상 문서의 upvotes/downvotes 카운터는 firestore.Increment 로만 변경합니다.
    - 투표 문서와 카운터는 하나의 트랜잭션으로 함께 저장됩니다.
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.votes_ref = self.db.collection('votes')
        self.questions_ref = self.db.collection('questions')
        self.comments_ref = self.db.collection('comments')

    def _target_ref(self, item_type: ItemType, item_id: str):
        if item_type is ItemType.QUESTION:
            return self.questions_ref.document(item_id)
        return self.comments_ref.document(item_id)

    @staticmethod
    def _parse_vote_type(data: Optional[Dict]) -> VoteType:
        try:
            return VoteType((data or {}).get('vote_type', VoteType.NONE.value))
        except ValueError:
            return VoteType.NONE

    def get_user_vote(self, item_type: ItemType, item_id: str, user_id: str) -> VoteType:
        """사용자의 현재 투표를 반환합니다. 기록이 없으면 NONE 입니다."""
        with store_errors("투표 정보를 불러오지 못했습니다"):
            doc = self.votes_ref.document(vote_document_id(item_type, item_id, user_id)).get()
        return self._parse_vote_type(doc.to_dict()) if doc.exists else VoteType.NONE

    def get_user_votes(self, item_type: ItemType, item_ids: List[str], user_id: str) -> Dict[str, VoteType]:
        """여러 대상에 대한 사용자의 투표를 일괄 조회합니다. 기록이 없는 대상은 결과에 포함하지 않습니다."""
        votes = {}
        for i in range(0, len(item_ids), 30):
            chunk_ids = item_ids[i:i+30]
            refs = [self.votes_ref.document(vote_document_id(item_type, item_id, user_id)) for item_id in chunk_ids]
            with store_errors("투표 정보를 불러오지 못했습니다"):
                docs = list(self.db.get_all(refs))
            for doc in docs:
                if not doc.exists:
                    continue
                data = doc.to_dict()
                vote_type = self._parse_vote_type(data)
                if vote_type is not VoteType.NONE:
                    votes[data.get('item_id')] = vote_type
        return votes

    def get_state(self, item_type: ItemType, item_id: str, user_id: str) -> Optional[VoteState]:
        """대상의 현재 카운터와 사용자의 투표를 함께 반환합니다. 대상이 없으면 None."""
        with store_errors("투표 대상을 불러오지 못했습니다"):
            target_doc = self._target_ref(item_type, item_id).get()
        if not target_doc.exists:
            return None
        data = target_doc.to_dict()
        return VoteState(
            vote=self.get_user_vote(item_type, item_id, user_id),
            upvotes=data.get('upvotes') or 0,
            downvotes=data.get('downvotes') or 0,
        )

    def cast_vote(self, item_type: ItemType, item_id: str, user_id: str, requested: VoteType,
                  question_id: Optional[str] = None) -> Tuple[VoteType, bool]:
        """
        투표를 기록하고 대상의 카운터를 갱신합니다.
        (이전 투표, 변경 여부) 를 반환합니다.

        트랜잭션 안에서:
        1. 대상과 현재 투표를 읽습니다 (투표가 없으면 NONE).
        2. 요청과 같으면 아무것도 쓰지 않습니다.
        3. 투표 문서를 덮어씁니다. 취소도 NONE 으로 기록합니다.
        4. 변화량을 Increment 로 반영합니다.
        같은 사용자의 요청이 겹치면 Firestore 가 트랜잭션을 다시 실행하므로 두 번째 요청은 바뀐 투표를 읽게 됩니다.
        """
        target_ref = self._target_ref(item_type, item_id)
        vote_ref = self.votes_ref.document(vote_document_id(item_type, item_id, user_id))
        transaction = self.db.transaction()

        @firestore.transactional
        def _cast_in_transaction(transaction):
            target_doc = target_ref.get(transaction=transaction)
            if not target_doc.exists:
                raise NotFoundError("투표할 대상을 찾을 수 없습니다.")
            vote_doc = vote_ref.get(transaction=transaction)
            current = self._parse_vote_type(vote_doc.to_dict()) if vote_doc.exists else VoteType.NONE
            if current == requested:
                return current, False

            if item_type is ItemType.QUESTION:
                owner_question_id = item_id
            else:
                owner_question_id = question_id or target_doc.to_dict().get('question_id')
            vote = Vote(item_type=item_type, item_id=item_id, user_id=user_id,
                        vote_type=requested, question_id=owner_question_id)
            transaction.set(vote_ref, DateTimeUtils.for_firestore(asdict(vote)))

            updates = counter_updates(current, requested)
            if updates:
                transaction.update(target_ref, {name: firestore.Increment(delta) for name, delta in updates.items()})
            return current, True

        try:
            with store_errors("투표를 저장하지 못했습니다"):
                current, changed = _cast_in_transaction(transaction)
        except ValueError as e:
            # 재시도 횟수를 모두 쓰면 firestore.transactional 이 ValueError 로 감싸서 던집니다.
            logging.error(f"투표 트랜잭션 재시도 초과 ({item_type.value}: {item_id}, user_id: {user_id}): {e}")
            raise PersistenceError("투표를 저장하지 못했습니다.") from e

        if changed:
            logging.info(f"투표 반영 ({item_type.value}: {item_id}): {current.value} -> {requested.value}")
        return current, changed

    def submit(self, state: VoteState, item_type: ItemType, item_id: str, user_id: str, requested: VoteType,
               question_id: Optional[str] = None) -> VoteOutcome:
        """
        낙관적 상태를 계산하고 저장소에 반영합니다. 저장소 실패는 예외 대신 ok=False 결과로 돌려줍니다.
        대상이 없으면 NotFoundError 가 그대로 전파됩니다.
        """
        optimistic = apply_vote(state, requested)
        try:
            _, changed = self.cast_vote(item_type, item_id, user_id, requested, question_id=question_id)
        except PersistenceError as e:
            return VoteOutcome(ok=False, state=state, previous_state=state, error=e.message)
        return VoteOutcome(ok=True, state=optimistic if changed else state, previous_state=state, changed=changed)

    def recount(self, item_type: ItemType, item_id: str) -> Dict[str, int]:
        """
        투표 원장을 기준으로 대상의 upvotes/downvotes 를 다시 계산해 덮어씁니다.
        원장 밖에서 카운터가 바뀐 경우(수동 수정, 이전 데이터 등)를 복구할 때 사용합니다.
        """
        target_ref = self._target_ref(item_type, item_id)
        with store_errors("투표 대상을 불러오지 못했습니다"):
            target_exists = target_ref.get().exists
        if not target_exists:
            raise NotFoundError("재집계할 대상을 찾을 수 없습니다.")

        query = (self.votes_ref
                 .where(filter=FieldFilter('item_type', '==', item_type.value))
                 .where(filter=FieldFilter('item_id', '==', item_id)))
        totals = {'upvotes': 0, 'downvotes': 0}
        with store_errors("투표 기록을 불러오지 못했습니다"):
            docs = list(query.stream())
        for doc in docs:
            vote_type = self._parse_vote_type(doc.to_dict())
            if vote_type is VoteType.UP:
                totals['upvotes'] += 1
            elif vote_type is VoteType.DOWN:
                totals['downvotes'] += 1

        with store_errors("투표 수를 재집계하지 못했습니다"):
            target_ref.update(totals)
        logging.info(f"투표 재집계 완료 ({item_type.value}: {item_id}): {totals}")
        return totals

    def delete_votes_for_question(self, question_id: str) -> int:
        """질문 삭제 시 질문과 그 댓글에 대한 투표 기록을 함께 삭제합니다."""
        with store_errors("투표 기록을 삭제하지 못했습니다"):
            docs = list(self.votes_ref.where(filter=FieldFilter('question_id', '==', question_id)).stream())
            for doc in docs:
                doc.reference.delete()
        return len(docs)

    def delete_votes_for_item(self, item_type: ItemType, item_id: str) -> int:
        query = (self.votes_ref
                 .where(filter=FieldFilter('item_type', '==', item_type.value))
                 .where(filter=FieldFilter('item_id', '==', item_id)))
        with store_errors("투표 기록을 삭제하지 못했습니다"):
            docs = list(query.stream())
            for doc in docs:
                doc.reference.delete()
        return len(docs)

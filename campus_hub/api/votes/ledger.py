# campus_hub/api/votes/ledger.py
"""
투표 상태 전이 계산.

- vote_delta: 이전 투표 → 새 투표로 바뀔 때 upvotes/downvotes 카운터에 더할 값을 계산합니다.
- apply_vote: 클라이언트(또는 호출자)가 낙관적으로 반영할 로컬 상태를 계산합니다.
- VoteOutcome: 투표 요청의 결과. 실패 시 previous_state 로 되돌리면 됩니다.
"""
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from campus_hub.models.vote import VoteType

_COUNTER_FIELDS = {VoteType.UP: 'upvotes', VoteType.DOWN: 'downvotes'}


def vote_delta(current: VoteType, requested: VoteType) -> Tuple[int, int]:
    """
    (upvotes 변화량, downvotes 변화량) 을 반환합니다.
    기존 투표를 취소하며 -1, 새 투표를 반영하며 +1. 같은 투표면 (0, 0).
    """
    up, down = 0, 0
    if current == requested:
        return up, down
    if current is VoteType.UP:
        up -= 1
    elif current is VoteType.DOWN:
        down -= 1
    if requested is VoteType.UP:
        up += 1
    elif requested is VoteType.DOWN:
        down += 1
    return up, down


def counter_updates(current: VoteType, requested: VoteType) -> dict:
    """Firestore 문서에 적용할 {필드: 변화량}. 변화가 없는 필드는 포함하지 않습니다."""
    up, down = vote_delta(current, requested)
    updates = {}
    if up:
        updates[_COUNTER_FIELDS[VoteType.UP]] = up
    if down:
        updates[_COUNTER_FIELDS[VoteType.DOWN]] = down
    return updates


@dataclass(frozen=True)
class VoteState:
    """한 사용자 관점에서 본 대상의 투표 상태."""
    vote: VoteType = VoteType.NONE
    upvotes: int = 0
    downvotes: int = 0

    @property
    def score(self) -> int:
        return self.upvotes - self.downvotes


def apply_vote(state: VoteState, requested: VoteType) -> VoteState:
    """낙관적 업데이트용. 저장소를 건드리지 않고 새 상태를 계산합니다."""
    up, down = vote_delta(state.vote, requested)
    return replace(
        state,
        vote=requested,
        upvotes=max(0, state.upvotes + up),
        downvotes=max(0, state.downvotes + down),
    )


@dataclass(frozen=True)
class VoteOutcome:
    """
    투표 명령의 결과.
    - ok=True: state 가 확정된 상태입니다.
    - ok=False: 저장소 반영에 실패했습니다. 호출자는 previous_state 로 되돌립니다.
    """
    ok: bool
    state: VoteState
    previous_state: VoteState
    changed: bool = False
    error: Optional[str] = None

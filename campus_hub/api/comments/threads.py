# campus_hub/api/comments/threads.py
"""
질문 상세 화면의 댓글 스레드를 만드는 순수 함수 모음.

처리 순서: 정렬(sort_comments) → 검색 필터(filter_comments) → 트리 구성(build_comment_tree)

- 트리 구성은 입력 순서를 그대로 유지합니다. 자식 목록의 순서도 정렬 단계의 결과를 따릅니다.
- 부모가 현재 목록에 없는 댓글(삭제, 검색 필터 등)은 버리지 않고 최상위 댓글로 올립니다.
- 들여쓰기 최대 깊이는 표시용 값일 뿐, 트리 구조는 바꾸지 않습니다.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from campus_hub.models.comment import Comment
from campus_hub.utils.datetime_utils import EPOCH

DEFAULT_MAX_DISPLAY_DEPTH = 8


class CommentSort(Enum):
    TOP = "top"
    NEWEST = "newest"
    OLDEST = "oldest"
    CONTROVERSIAL = "controversial"

    @classmethod
    def parse(cls, value) -> "CommentSort":
        """알 수 없는 값이나 None 은 기본값(TOP)으로 처리합니다."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.TOP


@dataclass
class CommentNode:
    """댓글 하나와 그 답글 목록. 요청마다 새로 만들어집니다."""
    comment: Comment
    replies: List["CommentNode"] = field(default_factory=list)


def _created_at(comment: Comment):
    return comment.created_at or EPOCH


def sort_comments(comments: Iterable[Comment], sort=CommentSort.TOP) -> List[Comment]:
    """
    선택한 기준으로 댓글을 정렬합니다. 같은 값끼리는 원래 순서를 유지합니다(stable).
    - top: upvotes 내림차순
    - newest: created_at 내림차순
    - oldest: created_at 오름차순
    - controversial: upvotes + downvotes 내림차순
    """
    sort = CommentSort.parse(sort)
    comments = list(comments)
    if sort is CommentSort.NEWEST:
        return sorted(comments, key=_created_at, reverse=True)
    if sort is CommentSort.OLDEST:
        return sorted(comments, key=_created_at)
    if sort is CommentSort.CONTROVERSIAL:
        return sorted(comments, key=lambda c: -(c.upvotes + c.downvotes))
    return sorted(comments, key=lambda c: -c.upvotes)


def filter_comments(comments: Iterable[Comment], query: Optional[str]) -> List[Comment]:
    """본문 또는 작성자 이름에 검색어가 포함된 댓글만 남깁니다 (대소문자 무시)."""
    comments = list(comments)
    if not query or not query.strip():
        return comments

    needle = query.strip().lower()

    def _matches(comment: Comment) -> bool:
        if needle in (comment.content or '').lower():
            return True
        display_name = comment.author.display_name if comment.author else None
        return needle in (display_name or '').lower()

    return [c for c in comments if _matches(c)]


def build_comment_tree(comments: Iterable[Comment]) -> List[CommentNode]:
    """
    평탄한 댓글 목록을 parent_id 기준의 트리로 변환하고 최상위 노드 목록을 반환합니다.
    """
    comments = list(comments)
    nodes: Dict[str, CommentNode] = {c.comment_id: CommentNode(comment=c) for c in comments}

    roots: List[CommentNode] = []
    for comment in comments:
        node = nodes[comment.comment_id]
        parent = nodes.get(comment.parent_id) if comment.parent_id else None
        # 자기 자신을 부모로 가리키는 잘못된 문서도 최상위로 취급합니다.
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.replies.append(node)

    # parent_id 가 서로를 가리키는 손상된 데이터는 최상위에서 도달할 수 없으므로,
    # 입력 순서상 먼저 나온 댓글부터 최상위로 올립니다.
    reachable = {id(n) for n, _ in iter_nodes(roots)}
    if len(reachable) < len(nodes):
        for comment in comments:
            node = nodes[comment.comment_id]
            if id(node) in reachable:
                continue
            nodes[comment.parent_id].replies.remove(node)
            roots.append(node)
            reachable.update(id(n) for n, _ in iter_nodes([node]))
    return roots


def prepare_thread(comments: Iterable[Comment], sort=CommentSort.TOP, query: Optional[str] = None) -> List[CommentNode]:
    """정렬 → 필터 → 트리 구성을 한 번에 수행합니다."""
    return build_comment_tree(filter_comments(sort_comments(comments, sort), query))


def iter_nodes(roots: Iterable[CommentNode], level: int = 0) -> Iterator[Tuple[CommentNode, int]]:
    """깊이 우선으로 (노드, 깊이) 를 순회합니다. 최상위 댓글의 깊이는 0 입니다."""
    stack = [(node, level) for node in reversed(list(roots))]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((child, depth + 1) for child in reversed(node.replies))


def count_nodes(roots: Iterable[CommentNode]) -> int:
    return sum(1 for _ in iter_nodes(roots))


def display_depth(level: int, max_depth: int = DEFAULT_MAX_DISPLAY_DEPTH) -> int:
    """화면 들여쓰기 깊이. max_depth 보다 깊은 답글은 max_depth 에 맞춰 표시합니다."""
    return min(level, max_depth)

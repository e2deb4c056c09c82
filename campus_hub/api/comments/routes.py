# campus_hub/api/comments/routes.py
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from campus_hub.api.comments.schemas import CommentCreateSchema, CommentThreadQuerySchema, CommentThreadSchema
from campus_hub.api.comments.threads import CommentSort, iter_nodes, count_nodes, display_depth
from campus_hub.core.permissions import current_user_profile
from campus_hub.models.vote import ItemType

comments_bp = Blueprint('comments_bp', __name__)

def _thread_to_dicts(roots, max_depth, my_votes):
    """
    댓글 트리를 응답용 중첩 dict 로 변환합니다.
    - 트리는 iter_nodes 로 순회하므로 답글 체인이 아무리 길어도 재귀하지 않습니다.
    - max_depth 보다 깊은 답글은 max_depth 단계의 replies 목록에 순서대로 이어 붙입니다.
      depth 와 parent_id 는 실제 값을 그대로 유지합니다.
    """
    schema = CommentThreadSchema()
    comments = []
    # 표시 깊이별로 다음 노드가 들어갈 목록
    containers = {0: comments}
    for node, level in iter_nodes(roots):
        comment = node.comment
        vote = my_votes.get(comment.comment_id)
        shown = display_depth(level, max_depth)
        item = schema.dump({
            'comment_id': comment.comment_id,
            'question_id': comment.question_id,
            'parent_id': comment.parent_id,
            'author': comment.author,
            'content': comment.content,
            'upvotes': comment.upvotes,
            'downvotes': comment.downvotes,
            'created_at': comment.created_at,
            'my_vote': vote.value if vote else 'none',
            'depth': level,
            'display_depth': shown,
        })
        item['replies'] = []
        containers[shown].append(item)
        if shown < max_depth:
            containers[shown + 1] = item['replies']
    return comments

def _thread_response(question_id: str, sort, query, user_id):
    """정렬/검색이 적용된 댓글 트리를 응답 형식으로 변환합니다."""
    roots = current_app.services['comments'].get_thread(question_id, sort, query)
    my_votes = {}
    if user_id and roots:
        comment_ids = [node.comment.comment_id for node, _ in iter_nodes(roots)]
        my_votes = current_app.services['votes'].get_user_votes(ItemType.COMMENT, comment_ids, user_id)
    max_depth = current_app.config['COMMENT_MAX_DISPLAY_DEPTH']
    return {
        "comments": _thread_to_dicts(roots, max_depth, my_votes),
        "sort": sort.value,
        "total": count_nodes(roots),
    }

def _resolve_sort(value):
    return CommentSort.parse(value or current_app.config['DEFAULT_COMMENT_SORT'])

@comments_bp.route('/questions/<string:question_id>/comments', methods=['GET'])
@jwt_required(optional=True)
def get_comment_thread(question_id: str):
    """
    질문의 댓글 스레드를 조회합니다.
    - sort: top | newest | oldest | controversial (알 수 없는 값은 기본 정렬)
    - q: 본문/작성자 이름 검색어. 부모가 걸러진 답글은 최상위로 표시됩니다.
    """
    args = CommentThreadQuerySchema().load(request.args)
    if current_app.services['questions'].get_question(question_id, count_view=False) is None:
        return jsonify({"error_code": "QUESTION_NOT_FOUND", "message": "질문을 찾을 수 없습니다."}), 404
    body = _thread_response(question_id, _resolve_sort(args['sort']), args['q'], get_jwt_identity())
    return jsonify(body), 200

@comments_bp.route('/questions/<string:question_id>/comments', methods=['POST'])
@jwt_required()
def create_comment(question_id: str):
    """
    질문에 댓글 또는 답글(parent_id)을 작성합니다.
    성공 시 201 과 함께 새로 고친 댓글 스레드를 반환합니다.
    """
    profile = current_user_profile()
    if profile is None:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자 프로필을 찾을 수 없습니다."}), 401
    data = CommentCreateSchema().load(request.get_json() or {})
    comment = current_app.services['comments'].add_comment(question_id, profile, data['content'], data['parent_id'])

    body = _thread_response(question_id, _resolve_sort(request.args.get('sort')), None, profile.uid)
    body['comment_id'] = comment.comment_id
    return jsonify(body), 201

@comments_bp.route('/comments/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(comment_id: str):
    """댓글을 삭제합니다. 작성자 본인 또는 포럼 관리 권한이 필요합니다."""
    profile = current_user_profile()
    if profile is None:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자 프로필을 찾을 수 없습니다."}), 401
    current_app.services['comments'].delete_comment(comment_id, profile)
    return Response(status=204)

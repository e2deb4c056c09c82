# campus_hub/api/questions/routes.py
import logging
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from campus_hub.api.questions.schemas import (
    QuestionCreateSchema, QuestionUpdateSchema, QuestionListQuerySchema, QuestionResponseSchema
)
from campus_hub.core.permissions import permission_required, current_user_profile, CREATE_QUESTIONS
from campus_hub.models.vote import ItemType

questions_bp = Blueprint('questions_bp', __name__)

def _with_my_votes(questions, user_id):
    """질문 목록 응답에 요청자의 투표 상태(my_vote)를 채워 넣습니다."""
    body = QuestionResponseSchema(many=True).dump(questions)
    if user_id and questions:
        my_votes = current_app.services['votes'].get_user_votes(
            ItemType.QUESTION, [q.question_id for q in questions], user_id)
        for item in body:
            vote = my_votes.get(item['question_id'])
            if vote:
                item['my_vote'] = vote.value
    return body

@questions_bp.route('', methods=['POST'])
@permission_required(CREATE_QUESTIONS)
def create_question():
    """새 질문을 작성합니다. 성공 시 201 과 생성된 질문을 반환합니다."""
    data = QuestionCreateSchema().load(request.get_json() or {})
    question = current_app.services['questions'].create_question(current_user_profile(), data)
    return jsonify(QuestionResponseSchema().dump(question)), 201

@questions_bp.route('', methods=['GET'])
@jwt_required(optional=True)
def list_questions():
    """
    질문 목록을 조회합니다.
    - community: 커뮤니티 ID ('all' 또는 생략 시 전체)
    - tag: 태그 필터
    - sort: recent | popular | unanswered
    """
    args = QuestionListQuerySchema().load(request.args)
    questions = current_app.services['questions'].list_questions(
        community_id=args['community'], tag=args['tag'], sort=args['sort'])
    return jsonify({"questions": _with_my_votes(questions, get_jwt_identity())}), 200

@questions_bp.route('/mine', methods=['GET'])
@jwt_required()
def list_my_questions():
    user_id = get_jwt_identity()
    questions = current_app.services['questions'].list_by_author(user_id)
    return jsonify({"questions": _with_my_votes(questions, user_id)}), 200

@questions_bp.route('/<string:question_id>', methods=['GET'])
@jwt_required(optional=True)
def get_question(question_id: str):
    """질문 상세를 조회합니다. 조회할 때마다 조회수가 1 증가합니다."""
    question = current_app.services['questions'].get_question(question_id)
    if question is None:
        return jsonify({"error_code": "QUESTION_NOT_FOUND", "message": "질문을 찾을 수 없습니다."}), 404
    return jsonify(_with_my_votes([question], get_jwt_identity())[0]), 200

@questions_bp.route('/<string:question_id>', methods=['PATCH'])
@jwt_required()
def update_question(question_id: str):
    """질문 작성자가 제목/본문/태그를 수정합니다."""
    profile = current_user_profile()
    if profile is None:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자 프로필을 찾을 수 없습니다."}), 401
    patch = QuestionUpdateSchema().load(request.get_json() or {})
    question = current_app.services['questions'].update_question(question_id, profile, patch)
    return jsonify(QuestionResponseSchema().dump(question)), 200

@questions_bp.route('/<string:question_id>', methods=['DELETE'])
@jwt_required()
def delete_question(question_id: str):
    """질문을 삭제합니다. 작성자 또는 delete_content 권한이 필요하며, 댓글과 투표도 함께 삭제됩니다."""
    profile = current_user_profile()
    if profile is None:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자 프로필을 찾을 수 없습니다."}), 401
    current_app.services['questions'].delete_question(question_id, profile)
    logging.info(f"질문 삭제 요청 처리 완료 (question_id: {question_id})")
    return Response(status=204)

# campus_hub/api/search/routes.py
from flask import Blueprint, request, jsonify, current_app

from campus_hub.api.search.schemas import SearchQuerySchema, SearchResultSchema

search_bp = Blueprint('search_bp', __name__)

@search_bp.route('', methods=['GET'])
def search():
    """질문/이벤트/커뮤니티 통합 검색. 검색어가 2자 미만이면 빈 목록을 반환합니다."""
    args = SearchQuerySchema().load(request.args)
    results = current_app.services['search'].search_all(
        args['q'],
        include_questions=args['include_questions'],
        include_events=args['include_events'],
        include_communities=args['include_communities'],
        max_results=args['max_results'],
        community_id=args['community'],
    )
    return jsonify({"query": args['q'], "results": SearchResultSchema(many=True).dump(results)}), 200

@search_bp.route('/quick', methods=['GET'])
def quick_search():
    """검색창 자동완성용 빠른 검색."""
    term = request.args.get('q', '', type=str)
    results = current_app.services['search'].quick_search(term)
    return jsonify({"query": term, "results": SearchResultSchema(many=True).dump(results)}), 200

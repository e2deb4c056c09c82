# campus_hub/api/search/test_search_routes.py
def test_search_endpoint(client, make_question):
    make_question(title='ACM contest practice', community_id='acm')

    body = client.get('/api/search?q=contest').get_json()
    assert body['query'] == 'contest'
    assert [(r['type'], r['title']) for r in body['results']] == [('question', 'ACM contest practice')]

    assert client.get('/api/search?q=c').get_json()['results'] == []
    assert client.get('/api/search').status_code == 400
    assert client.get('/api/search?q=contest&max_results=500').status_code == 400


def test_quick_search_and_type_filters(client, make_question):
    make_question(title='GDG Cloud credits')

    quick = client.get('/api/search/quick?q=gdg').get_json()['results']
    assert {r['type'] for r in quick} == {'question', 'community'}

    only_communities = client.get('/api/search?q=gdg&include_questions=false').get_json()['results']
    assert [r['id'] for r in only_communities] == ['gdg']


def test_communities(client, make_question):
    make_question(title='IEEE membership fee?', community_id='ieee')

    communities = client.get('/api/communities').get_json()['communities']
    assert [c['community_id'] for c in communities] == ['all', 'gdg', 'acm', 'cultural-club', 'ieee', 'general-tech']

    detail = client.get('/api/communities/ieee').get_json()
    assert detail['community']['name'] == 'IEEE Org'
    assert [q['title'] for q in detail['recent_questions']] == ['IEEE membership fee?']
    assert client.get('/api/communities/chess').status_code == 404

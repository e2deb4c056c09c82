# campus_hub/api/questions/test_question_routes.py
QUESTION = {
    'title': 'Where do GDG meetups happen?',
    'content': 'I am new on campus and want to attend the next one.',
    'community_id': 'gdg',
    'tags': ['Events', 'gdg'],
}


def test_create_question(client, make_user, auth_headers):
    user = make_user()
    res = client.post('/api/questions', json=QUESTION, headers=auth_headers(user.uid))

    assert res.status_code == 201
    body = res.get_json()
    assert body['tags'] == ['events', 'gdg']
    assert body['author']['uid'] == user.uid
    assert body['upvotes'] == 0 and body['reply_count'] == 0


def test_create_question_requires_login_and_profile(client, auth_headers):
    assert client.post('/api/questions', json=QUESTION).status_code == 401

    res = client.post('/api/questions', json=QUESTION, headers=auth_headers('no-profile'))
    assert res.status_code == 401
    assert res.get_json()['error_code'] == 'USER_NOT_FOUND'


def test_create_question_validation(client, make_user, auth_headers):
    headers = auth_headers(make_user().uid)

    res = client.post('/api/questions', json={**QUESTION, 'community_id': 'all'}, headers=headers)
    assert res.status_code == 400
    assert 'community_id' in res.get_json()['details']

    res = client.post('/api/questions', json={**QUESTION, 'tags': ['a', 'b', 'c', 'd', 'e', 'f']}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'VALIDATION_ERROR'


def test_get_question_counts_view_and_reports_my_vote(client, make_user, make_question, auth_headers, services):
    question = make_question()
    viewer = make_user()
    client.post(f'/api/questions/{question.question_id}/vote', json={'vote_type': 'up'},
                headers=auth_headers(viewer.uid))

    anonymous = client.get(f'/api/questions/{question.question_id}').get_json()
    mine = client.get(f'/api/questions/{question.question_id}', headers=auth_headers(viewer.uid)).get_json()

    assert anonymous['views'] == 1 and anonymous['my_vote'] == 'none'
    assert mine['views'] == 2 and mine['my_vote'] == 'up'
    assert client.get('/api/questions/missing').status_code == 404


def test_list_questions_with_filters(client, make_user, make_question, auth_headers):
    me = make_user()
    make_question(author=me, community_id='acm', tags=['cpp'])
    make_question(community_id='gdg', tags=['web'])

    assert len(client.get('/api/questions').get_json()['questions']) == 2
    gdg = client.get('/api/questions?community=gdg&sort=popular').get_json()['questions']
    assert [q['community_id'] for q in gdg] == ['gdg']
    assert client.get('/api/questions?sort=hot').status_code == 400

    mine = client.get('/api/questions/mine', headers=auth_headers(me.uid)).get_json()['questions']
    assert [q['tags'] for q in mine] == [['cpp']]


def test_update_and_delete_question(client, make_user, make_question, auth_headers, db):
    owner = make_user()
    question = make_question(author=owner)
    url = f'/api/questions/{question.question_id}'

    res = client.patch(url, json={'title': 'Updated meetup question'}, headers=auth_headers(make_user().uid))
    assert res.status_code == 403
    assert res.get_json()['error_code'] == 'FORBIDDEN'

    res = client.patch(url, json={'title': 'Updated meetup question'}, headers=auth_headers(owner.uid))
    assert res.status_code == 200
    assert res.get_json()['title'] == 'Updated meetup question'

    assert client.delete(url, headers=auth_headers(make_user(role='admin').uid)).status_code == 204
    assert db.raw('questions', question.question_id) is None
    assert client.delete(url, headers=auth_headers(owner.uid)).status_code == 404


def test_unknown_route_is_404(client):
    assert client.get('/api/nothing-here').status_code == 404

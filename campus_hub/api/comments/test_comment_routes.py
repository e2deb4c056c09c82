# campus_hub/api/comments/test_comment_routes.py
def post_comment(client, question_id, headers, content, parent_id=None):
    payload = {'content': content}
    if parent_id:
        payload['parent_id'] = parent_id
    return client.post(f'/api/questions/{question_id}/comments', json=payload, headers=headers)


def test_post_comment_returns_refreshed_thread(client, make_user, make_question, auth_headers, db):
    question = make_question()
    headers = auth_headers(make_user(display_name='Meera').uid)

    first = post_comment(client, question.question_id, headers, 'Room 204, Fridays')
    assert first.status_code == 201
    parent_id = first.get_json()['comment_id']

    res = post_comment(client, question.question_id, headers, 'Thanks!', parent_id=parent_id)
    body = res.get_json()

    assert res.status_code == 201
    assert body['total'] == 2
    assert [c['comment_id'] for c in body['comments']] == [parent_id]
    reply = body['comments'][0]['replies'][0]
    assert reply['comment_id'] == body['comment_id']
    assert (reply['depth'], reply['display_depth']) == (1, 1)
    assert reply['author']['display_name'] == 'Meera'
    assert db.raw('questions', question.question_id)['reply_count'] == 2


def test_post_comment_validation_and_missing_question(client, make_user, make_question, auth_headers):
    headers = auth_headers(make_user().uid)
    question = make_question()

    res = post_comment(client, question.question_id, headers, '   ')
    assert res.status_code == 400
    assert 'content' in res.get_json()['details']
    assert post_comment(client, question.question_id, headers, 'x' * 5001).status_code == 400
    assert post_comment(client, 'ghost', headers, 'hello').status_code == 404


def test_thread_sort_and_search(client, make_user, make_question, auth_headers):
    question = make_question()
    alice, bob = make_user(display_name='Alice'), make_user(display_name='Bob')
    parent_id = post_comment(client, question.question_id, auth_headers(alice.uid), 'Ask in the ACM group').get_json()['comment_id']
    post_comment(client, question.question_id, auth_headers(bob.uid), 'Or check the IEEE notice board', parent_id=parent_id)
    url = f'/api/questions/{question.question_id}/comments'

    unknown_sort = client.get(f'{url}?sort=hottest').get_json()
    assert unknown_sort['sort'] == 'top'

    newest = client.get(f'{url}?sort=newest').get_json()
    assert newest['sort'] == 'newest'
    assert newest['comments'][0]['content'] == 'Ask in the ACM group'

    filtered = client.get(f'{url}?q=ieee').get_json()
    assert [c['content'] for c in filtered['comments']] == ['Or check the IEEE notice board']
    assert filtered['comments'][0]['depth'] == 0

    assert client.get('/api/questions/ghost/comments').status_code == 404


def test_thread_reports_my_vote(client, make_user, make_question, auth_headers):
    question = make_question()
    voter = make_user()
    comment_id = post_comment(client, question.question_id, auth_headers(voter.uid), 'Vote me').get_json()['comment_id']
    client.post(f'/api/questions/{question.question_id}/comments/{comment_id}/vote',
                json={'vote_type': 'down'}, headers=auth_headers(voter.uid))

    url = f'/api/questions/{question.question_id}/comments'
    mine = client.get(url, headers=auth_headers(voter.uid)).get_json()['comments'][0]
    anonymous = client.get(url).get_json()['comments'][0]

    assert mine['my_vote'] == 'down' and mine['downvotes'] == 1
    assert anonymous['my_vote'] == 'none'


def test_delete_comment_route(client, make_user, make_question, auth_headers):
    question = make_question()
    author = make_user()
    comment_id = post_comment(client, question.question_id, auth_headers(author.uid), 'Oops').get_json()['comment_id']

    assert client.delete(f'/api/comments/{comment_id}', headers=auth_headers(make_user().uid)).status_code == 403
    assert client.delete(f'/api/comments/{comment_id}', headers=auth_headers(author.uid)).status_code == 204
    assert client.delete(f'/api/comments/{comment_id}', headers=auth_headers(author.uid)).status_code == 404


def test_deep_reply_chain_is_flattened_at_display_cap(app, client, services, make_user, make_question):
    question = make_question()
    author = make_user()
    parent_id = None
    for i in range(400):
        parent_id = services['comments'].add_comment(question.question_id, author, f'reply {i}', parent_id).comment_id

    res = client.get(f'/api/questions/{question.question_id}/comments?sort=oldest')
    body = res.get_json()
    max_depth = app.config['COMMENT_MAX_DISPLAY_DEPTH']

    assert res.status_code == 200
    assert body['total'] == 400

    # max_depth 단계까지는 중첩되고, 그보다 깊은 답글은 같은 목록에 이어 붙습니다.
    level = body['comments']
    for depth in range(max_depth):
        assert len(level) == 1
        assert level[0]['depth'] == depth
        level = level[0]['replies']

    assert len(level) == 400 - max_depth
    assert [c['depth'] for c in level] == list(range(max_depth, 400))
    assert all(c['display_depth'] == max_depth and c['replies'] == [] for c in level)
    assert level[-1]['content'] == 'reply 399'
    assert level[-1]['parent_id'] == level[-2]['comment_id']

# campus_hub/api/events/test_event_routes.py
from datetime import timedelta

from campus_hub.utils.datetime_utils import DateTimeUtils


def event_payload(days=3, **overrides):
    payload = {
        'title': 'IEEE Robotics Workshop',
        'description': 'Build a line follower in two hours.',
        'date_time': DateTimeUtils.to_iso_string(DateTimeUtils.now() + timedelta(days=days)),
        'club_name': 'IEEE VIT',
        'community_id': 'ieee',
        'rsvp_link': 'https://forms.example.com/robotics',
    }
    payload.update(overrides)
    return payload


def test_only_event_creators_can_post(client, make_user, auth_headers):
    res = client.post('/api/events', json=event_payload(), headers=auth_headers(make_user().uid))
    assert res.status_code == 403

    res = client.post('/api/events', json=event_payload(), headers=auth_headers(make_user(role='moderator').uid))
    assert res.status_code == 201
    assert res.get_json()['club_name'] == 'IEEE VIT'


def test_event_validation(client, make_user, auth_headers):
    headers = auth_headers(make_user(role='moderator').uid)
    assert client.post('/api/events', json=event_payload(date_time='next friday'), headers=headers).status_code == 400
    assert client.post('/api/events', json=event_payload(rsvp_link='not a url'), headers=headers).status_code == 400


def test_list_get_update_delete(client, make_user, auth_headers):
    owner = make_user(role='moderator')
    headers = auth_headers(owner.uid)
    past = client.post('/api/events', json=event_payload(days=-1, title='Past Workshop'), headers=headers).get_json()
    upcoming = client.post('/api/events', json=event_payload(days=2), headers=headers).get_json()

    assert len(client.get('/api/events').get_json()['events']) == 2
    assert len(client.get('/api/events?community=gdg').get_json()['events']) == 0
    assert [e['event_id'] for e in client.get('/api/events/upcoming').get_json()['events']] == [upcoming['event_id']]

    url = f"/api/events/{upcoming['event_id']}"
    assert client.get(url).get_json()['title'] == 'IEEE Robotics Workshop'
    res = client.patch(url, json={'title': 'Robotics Workshop II'}, headers=headers)
    assert res.status_code == 200 and res.get_json()['title'] == 'Robotics Workshop II'
    assert client.patch(url, json={'title': 'Mine now'}, headers=auth_headers(make_user().uid)).status_code == 403

    assert client.delete(f"/api/events/{past['event_id']}", headers=headers).status_code == 204
    assert client.get(f"/api/events/{past['event_id']}").status_code == 404

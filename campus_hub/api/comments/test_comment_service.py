# campus_hub/api/comments/test_comment_service.py
import pytest

from campus_hub.api.comments.threads import CommentSort
from campus_hub.core.exceptions import NotFoundError, ForbiddenError, PersistenceError
from campus_hub.models.vote import VoteType, ItemType


def test_add_comment_updates_question(db, services, make_question, make_user):
    question = make_question()
    author = make_user(display_name='Rahul')

    comment = services['comments'].add_comment(question.question_id, author, '  Fridays at 5pm  ')

    stored = db.raw('comments', comment.comment_id)
    assert stored['content'] == 'Fridays at 5pm'
    assert stored['parent_id'] is None
    assert stored['question_id'] == question.question_id
    assert (stored['upvotes'], stored['downvotes']) == (0, 0)
    assert db.raw('questions', question.question_id)['reply_count'] == 1


def test_add_comment_to_missing_question(services, make_user):
    with pytest.raises(NotFoundError):
        services['comments'].add_comment('ghost', make_user(), 'hello')


def test_reply_is_attached_to_parent(services, make_question, make_user):
    question = make_question()
    author = make_user()
    comments = services['comments']
    parent = comments.add_comment(question.question_id, author, 'parent')
    reply = comments.add_comment(question.question_id, author, 'child', parent_id=parent.comment_id)

    roots = comments.get_thread(question.question_id, CommentSort.OLDEST)

    assert reply.parent_id == parent.comment_id
    assert [n.comment.comment_id for n in roots] == [parent.comment_id]
    assert [n.comment.comment_id for n in roots[0].replies] == [reply.comment_id]


@pytest.mark.parametrize("bad_parent", ['does-not-exist', 'other-question'])
def test_invalid_parent_is_stored_as_top_level(services, make_question, make_user, bad_parent):
    question = make_question()
    author = make_user()
    comments = services['comments']
    if bad_parent == 'other-question':
        bad_parent = comments.add_comment(make_question().question_id, author, 'elsewhere').comment_id

    comment = comments.add_comment(question.question_id, author, 'reply', parent_id=bad_parent)

    assert comment.parent_id is None


def test_failed_write_does_not_touch_reply_count(db, services, make_question, make_user):
    question = make_question()
    db.fail_next('set', 'comments')

    with pytest.raises(PersistenceError):
        services['comments'].add_comment(question.question_id, make_user(), 'lost')

    assert db.raw('questions', question.question_id)['reply_count'] == 0


def test_failed_reads_raise_persistence_error(db, services, make_question, make_user):
    question = make_question()
    author = make_user()
    comments = services['comments']
    parent = comments.add_comment(question.question_id, author, 'parent')

    db.fail_next('get', 'questions')
    with pytest.raises(PersistenceError):
        comments.add_comment(question.question_id, author, 'lost')

    db.fail_next('get', 'comments')
    with pytest.raises(PersistenceError):
        comments.add_comment(question.question_id, author, 'lost reply', parent_id=parent.comment_id)

    db.fail_next('get', 'comments')
    with pytest.raises(PersistenceError):
        comments.get_comment(parent.comment_id)

    assert len(db.all_docs('comments')) == 1
    assert db.raw('questions', question.question_id)['reply_count'] == 1


def test_get_thread_applies_sort_and_query(services, make_question, make_user):
    question = make_question()
    comments = services['comments']
    alice, bob = make_user(display_name='Alice'), make_user(display_name='Bob')
    low = comments.add_comment(question.question_id, alice, 'Try the library')
    high = comments.add_comment(question.question_id, bob, 'Ask the GDG lead')
    services['votes'].cast_vote(ItemType.COMMENT, high.comment_id, alice.uid, VoteType.UP)

    top = comments.get_thread(question.question_id, CommentSort.TOP)
    assert [n.comment.comment_id for n in top] == [high.comment_id, low.comment_id]

    by_author = comments.get_thread(question.question_id, 'top', query='alice')
    assert [n.comment.comment_id for n in by_author] == [low.comment_id]


def test_delete_comment_permissions(db, services, make_question, make_user):
    question = make_question()
    author = make_user()
    comments = services['comments']
    comment = comments.add_comment(question.question_id, author, 'to be removed')

    with pytest.raises(ForbiddenError):
        comments.delete_comment(comment.comment_id, make_user())

    comments.delete_comment(comment.comment_id, make_user(role='moderator'))
    assert comments.get_comment(comment.comment_id) is None
    assert db.raw('questions', question.question_id)['reply_count'] == 0

    with pytest.raises(NotFoundError):
        comments.delete_comment(comment.comment_id, author)


def test_deleting_parent_promotes_replies(db, services, make_question, make_user):
    question = make_question()
    author = make_user()
    comments = services['comments']
    parent = comments.add_comment(question.question_id, author, 'parent')
    reply = comments.add_comment(question.question_id, author, 'reply', parent_id=parent.comment_id)
    services['votes'].cast_vote(ItemType.COMMENT, parent.comment_id, author.uid, VoteType.UP)

    comments.delete_comment(parent.comment_id, author)

    roots = comments.get_thread(question.question_id)
    assert [n.comment.comment_id for n in roots] == [reply.comment_id]
    assert db.all_docs('votes') == {}

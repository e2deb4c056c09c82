# conftest.py
"""
공용 pytest 픽스처.

테스트는 실제 Firebase 프로젝트 대신 메모리 기반 Firestore 대역(FakeFirestore)을 사용합니다.
서비스들은 생성자로 db 를 주입받으므로 firebase_admin 초기화 없이 동작합니다.

사용법: python -m pytest -v
"""
import copy
import uuid
from datetime import datetime, timezone

import pytest
from firebase_admin import firestore
from flask_jwt_extended import create_access_token
from google.api_core import exceptions as gcp_exceptions

from campus_hub import create_app
from campus_hub.models.user import UserProfile
from campus_hub.utils.datetime_utils import DateTimeUtils


# =====================================================================================
# 메모리 기반 Firestore 대역
# =====================================================================================
_MISSING = object()


def _get_field(data, path):
    value = data
    for part in path.split('.'):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


_OPERATORS = {
    '==': lambda a, b: a == b,
    '!=': lambda a, b: a != b,
    '<': lambda a, b: a < b,
    '<=': lambda a, b: a <= b,
    '>': lambda a, b: a > b,
    '>=': lambda a, b: a >= b,
    'in': lambda a, b: a in b,
    'array_contains': lambda a, b: isinstance(a, list) and b in a,
}


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, db, collection_name, doc_id):
        self._db = db
        self._collection_name = collection_name
        self.id = doc_id

    @property
    def _store(self):
        return self._db._collections.setdefault(self._collection_name, {})

    @property
    def _key(self):
        return (self._collection_name, self.id)

    def get(self, transaction=None):
        self._db._maybe_fail('get', self._collection_name)
        if transaction is not None:
            transaction._record_read(self)
        return FakeSnapshot(self, copy.deepcopy(self._store.get(self.id)))

    def set(self, data, merge=False):
        self._db._maybe_fail('set', self._collection_name)
        self._write_set(data, merge)

    def update(self, data):
        self._db._maybe_fail('update', self._collection_name)
        self._write_update(data)

    def delete(self):
        self._db._maybe_fail('delete', self._collection_name)
        self._write_delete()

    def _write_set(self, data, merge=False):
        base = copy.deepcopy(self._store.get(self.id, {})) if merge else {}
        self._store[self.id] = self._db._apply(base, data)
        self._db._touch(self._key)

    def _write_update(self, data):
        if self.id not in self._store:
            raise gcp_exceptions.NotFound(f"No document to update: {self._collection_name}/{self.id}")
        self._store[self.id] = self._db._apply(copy.deepcopy(self._store[self.id]), data)
        self._db._touch(self._key)

    def _write_delete(self):
        self._store.pop(self.id, None)
        self._db._touch(self._key)


class FakeTransaction:
    """
    firestore.transactional 데코레이터가 호출하는 메서드만 구현한 트랜잭션 대역.
    - 쓰기는 모아 두었다가 커밋 시점에 한 번에 반영합니다.
    - 트랜잭션 안에서 읽은 문서가 커밋 전에 바뀌었으면 Aborted 를 던져 데코레이터가 재시도하게 합니다.
    - 쓰기 중 하나라도 fail_next 대상이면 아무것도 반영하지 않고 실패합니다.
    """

    def __init__(self, db, max_attempts=5):
        self._db = db
        self._max_attempts = max_attempts
        self._read_only = False
        self._id = None
        self._reads = {}
        self._writes = []

    def _record_read(self, reference):
        self._reads.setdefault(reference._key, self._db._versions.get(reference._key, 0))

    def _clean_up(self):
        self._id = None
        self._reads = {}
        self._writes = []

    def _begin(self, retry_id=None):
        self._id = uuid.uuid4().bytes

    def _rollback(self):
        self._clean_up()

    def _commit(self):
        for op, reference, _ in self._writes:
            self._db._maybe_fail(op, reference._collection_name)
        self._db._run_commit_hooks()
        for key, version in self._reads.items():
            if self._db._versions.get(key, 0) != version:
                self._clean_up()
                raise gcp_exceptions.Aborted(f"document changed during transaction: {key[0]}/{key[1]}")
        for op, reference, args in self._writes:
            getattr(reference, f'_write_{op}')(*args)
        self._clean_up()
        return []

    def set(self, reference, document_data, merge=False):
        self._writes.append(('set', reference, (document_data, merge)))

    def update(self, reference, field_updates, option=None):
        self._writes.append(('update', reference, (field_updates,)))

    def delete(self, reference, option=None):
        self._writes.append(('delete', reference, ()))


class FakeQuery:
    def __init__(self, collection, filters=None, orders=None, limit_count=None):
        self._collection = collection
        self._filters = filters or []
        self._orders = orders or []
        self._limit = limit_count

    def where(self, field_path=None, op_string=None, value=None, *, filter=None):
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        return FakeQuery(self._collection, self._filters + [(field_path, op_string, value)], self._orders, self._limit)

    def order_by(self, field_path, direction='ASCENDING'):
        return FakeQuery(self._collection, self._filters, self._orders + [(field_path, direction)], self._limit)

    def limit(self, count):
        return FakeQuery(self._collection, self._filters, self._orders, count)

    def stream(self, transaction=None):
        db = self._collection._db
        db._maybe_fail('query', self._collection.id)
        store = db._collections.get(self._collection.id, {})
        results = []
        for doc_id, data in store.items():
            if all(self._matches(data, f) for f in self._filters):
                results.append((doc_id, data))
        for field_path, direction in reversed(self._orders):
            results = [r for r in results if _get_field(r[1], field_path) is not _MISSING]
            results.sort(key=lambda r: _get_field(r[1], field_path), reverse=(direction == firestore.Query.DESCENDING))
        if self._limit is not None:
            results = results[:self._limit]
        for doc_id, data in results:
            yield FakeSnapshot(self._collection.document(doc_id), copy.deepcopy(data))

    def get(self, transaction=None):
        return list(self.stream())

    @staticmethod
    def _matches(data, flt):
        field_path, op_string, value = flt
        actual = _get_field(data, field_path)
        if actual is _MISSING:
            return False
        return _OPERATORS[op_string](actual, value)


class FakeCollectionReference(FakeQuery):
    def __init__(self, db, name):
        self._db = db
        self.id = name
        super().__init__(self)

    def document(self, document_id=None):
        return FakeDocumentReference(self._db, self.id, document_id or uuid.uuid4().hex)


class FakeFirestore:
    """
    테스트에 필요한 만큼만 구현한 Firestore 클라이언트 대역.
    - Increment / SERVER_TIMESTAMP / DELETE_FIELD 변환을 지원합니다.
    - fail_next(op, collection) 으로 다음 호출 한 번을 ServiceUnavailable 로 실패시킬 수 있습니다.
    - before_next_commit(callback) 으로 다음 트랜잭션 커밋 직전에 다른 요청을 끼워 넣을 수 있습니다.
    """

    def __init__(self):
        self._collections = {}
        self._failures = []
        self._versions = {}
        self._commit_hooks = []

    def collection(self, name):
        return FakeCollectionReference(self, name)

    def transaction(self, **kwargs):
        return FakeTransaction(self, **kwargs)

    def get_all(self, references):
        return [ref.get() for ref in references]

    def fail_next(self, op, collection_name):
        self._failures.append((op, collection_name))

    def before_next_commit(self, callback):
        self._commit_hooks.append(callback)

    def _run_commit_hooks(self):
        hooks, self._commit_hooks = self._commit_hooks, []
        for hook in hooks:
            hook()

    def _touch(self, key):
        self._versions[key] = self._versions.get(key, 0) + 1

    def _maybe_fail(self, op, collection_name):
        if (op, collection_name) in self._failures:
            self._failures.remove((op, collection_name))
            raise gcp_exceptions.ServiceUnavailable(f"injected failure: {op} {collection_name}")

    def _apply(self, base, data):
        for key, value in data.items():
            parts = key.split('.')
            target = base
            for part in parts[:-1]:
                target = target.setdefault(part, {})
            leaf = parts[-1]
            if isinstance(value, firestore.Increment):
                target[leaf] = (target.get(leaf) or 0) + value.value
            elif value is firestore.SERVER_TIMESTAMP:
                target[leaf] = datetime.now(timezone.utc)
            elif value is firestore.DELETE_FIELD:
                target.pop(leaf, None)
            else:
                target[leaf] = copy.deepcopy(value)
        return base

    # 테스트 검증용 헬퍼
    def raw(self, collection_name, doc_id):
        return copy.deepcopy(self._collections.get(collection_name, {}).get(doc_id))

    def all_docs(self, collection_name):
        return copy.deepcopy(self._collections.get(collection_name, {}))


# =====================================================================================
# 픽스처
# =====================================================================================
@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def app(db):
    app = create_app('testing', db=db)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(db):
    """users 컬렉션에 프로필을 만들고 UserProfile 을 반환하는 팩토리."""
    def _make_user(uid=None, role='user', display_name='VIT Techie', email=None):
        uid = uid or f"user-{uuid.uuid4().hex[:8]}"
        profile = UserProfile(uid=uid, email=email or f"{uid}@vit.edu.in", display_name=display_name, role=role)
        data = DateTimeUtils.for_firestore({k: v for k, v in profile.__dict__.items()})
        db.collection('users').document(uid).set(data)
        return profile
    return _make_user


@pytest.fixture
def auth_headers(app):
    """사용자 uid 로 Access Token 을 발급해 Authorization 헤더를 만듭니다."""
    def _auth_headers(uid):
        with app.app_context():
            token = create_access_token(identity=uid)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def services(app):
    """create_app 과 동일하게 조립된 서비스 묶음 (app.services)."""
    return app.services


@pytest.fixture
def make_question(services, make_user):
    """질문을 하나 만들어 반환하는 팩토리. 작성자를 지정하지 않으면 새 사용자를 만듭니다."""
    def _make_question(author=None, community_id='gdg', title='How do I join the GDG chapter?', tags=None, **extra):
        author = author or make_user()
        data = {
            'title': title,
            'content': extra.pop('content', 'Looking for the sign-up form and meeting times.'),
            'community_id': community_id,
            'tags': tags or [],
        }
        return services['questions'].create_question(author, data)
    return _make_question

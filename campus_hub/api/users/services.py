# campus_hub/api/users/services.py
import logging
from dataclasses import asdict
from typing import Optional, List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from campus_hub.core.exceptions import NotFoundError, store_errors
from campus_hub.core.permissions import Role
from campus_hub.models.user import UserProfile
from campus_hub.utils.datetime_utils import DateTimeUtils

class UserService:
    """
    사용자 프로필 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 프로필 문서에는 role 만 저장하고, 권한은 읽을 때 계산합니다.
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')

    def create_profile(self, uid: str, email: str, display_name: Optional[str], photo_url: Optional[str] = None,
                       google_id: Optional[str] = None) -> UserProfile:
        """프로필이 없을 때만 기본 역할(user)로 생성합니다. 이미 있으면 기존 프로필을 반환합니다."""
        existing = self.get_profile(uid)
        if existing:
            return existing

        email = (email or '').strip().lower() or None
        profile = UserProfile(uid=uid, email=email, display_name=display_name, photo_url=photo_url, google_id=google_id)
        self.users_ref.document(uid).set(DateTimeUtils.for_firestore(asdict(profile)))
        logging.info(f"새 사용자 프로필 생성 (uid: {uid})")
        return profile

    def get_profile(self, uid: Optional[str]) -> Optional[UserProfile]:
        if not uid:
            return None
        with store_errors("사용자 프로필을 불러오지 못했습니다"):
            doc = self.users_ref.document(uid).get()
        if not doc.exists:
            return None
        return UserProfile.from_dict(doc.to_dict())

    def get_profile_by_google_id(self, google_id: str) -> Optional[UserProfile]:
        query = self.users_ref.where(filter=FieldFilter('google_id', '==', google_id)).limit(1)
        with store_errors("사용자 프로필을 불러오지 못했습니다"):
            user_doc = next(query.stream(), None)
        return UserProfile.from_dict(user_doc.to_dict()) if user_doc else None

    def search_user_by_email(self, email: str) -> Optional[UserProfile]:
        query = self.users_ref.where(filter=FieldFilter('email', '==', email.strip().lower())).limit(1)
        with store_errors("사용자 프로필을 불러오지 못했습니다"):
            user_doc = next(query.stream(), None)
        return UserProfile.from_dict(user_doc.to_dict()) if user_doc else None

    def search_user(self, term: str) -> Optional[UserProfile]:
        """
        관리자 화면의 사용자 검색.
        - 길이가 15자를 넘으면 먼저 uid 로 조회합니다.
        - '@' 가 포함되어 있으면 이메일로 조회합니다.
        """
        term = (term or '').strip()
        if not term:
            return None
        if len(term) > 15:
            profile = self.get_profile(term)
            if profile:
                return profile
        if '@' in term:
            return self.search_user_by_email(term)
        return None

    def update_role(self, uid: str, role: str) -> UserProfile:
        """역할을 변경합니다. 권한 목록은 저장하지 않습니다."""
        new_role = Role(role)
        user_ref = self.users_ref.document(uid)
        with store_errors("사용자 정보를 불러오지 못했습니다"):
            user_exists = user_ref.get().exists
        if not user_exists:
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        with store_errors("사용자 역할을 변경하지 못했습니다"):
            user_ref.update({
                'role': new_role.value,
                # 과거 문서에 남아 있을 수 있는 비정규화된 권한 배열을 제거합니다.
                'permissions': firestore.DELETE_FIELD,
                'updated_at': DateTimeUtils.now(),
            })
        logging.info(f"사용자 역할 변경 (uid: {uid}, role: {new_role.value})")
        return self.get_profile(uid)

    def list_users(self) -> List[UserProfile]:
        with store_errors("사용자 목록을 불러오지 못했습니다"):
            return [UserProfile.from_dict(doc.to_dict()) for doc in self.users_ref.stream()]

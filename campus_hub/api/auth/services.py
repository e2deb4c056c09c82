# campus_hub/api/auth/services.py
import uuid
import logging
from datetime import datetime, timezone
from typing import Tuple

from firebase_admin import firestore

from campus_hub.api.users.services import UserService
from campus_hub.core.exceptions import ForbiddenError, store_errors
from campus_hub.models.user import UserProfile
from campus_hub.services.google_auth_service import is_allowed_email
from campus_hub.utils.datetime_utils import DateTimeUtils

class AuthService:
    """
    로그인/로그아웃 관련 로직.
    - Google 사용자 정보로 프로필을 찾거나 생성합니다 (학교 이메일만 허용).
    - 로그아웃한 토큰의 jti 를 'revoked_tokens' 컬렉션에 저장합니다.
    """
    def __init__(self, user_service: UserService, allowed_email_domain: str, db=None):
        self.db = db or firestore.client()
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')
        self.user_service = user_service
        self.allowed_email_domain = allowed_email_domain

    def get_or_create_user_by_google(self, google_user_info: dict) -> Tuple[UserProfile, bool]:
        google_id = google_user_info.get('sub')
        if not google_id:
            raise ValueError("Google user info must contain 'sub' (google_id).")

        email = google_user_info.get('email')
        if not is_allowed_email(email, self.allowed_email_domain):
            raise ForbiddenError(f"@{self.allowed_email_domain} 이메일로만 로그인할 수 있습니다.")
        if google_user_info.get('email_verified') is False:
            raise ForbiddenError("이메일 인증이 완료되지 않은 계정입니다.")

        user = self.user_service.get_profile_by_google_id(google_id)
        if user:
            return user, False

        new_user = self.user_service.create_profile(
            uid=str(uuid.uuid4()),
            email=email,
            display_name=google_user_info.get('name'),
            photo_url=google_user_info.get('picture'),
            google_id=google_id,
        )
        return new_user, True

    # --- Blocklist 관련 로직 ---
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        """토큰의 jti를 만료 시간과 함께 저장합니다."""
        token_data = DateTimeUtils.for_firestore({
            'revoked_at': DateTimeUtils.now(),
            'expires_at': expires
        })
        self.revoked_tokens_ref.document(jti).set(token_data)

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        with store_errors("토큰 상태를 확인하지 못했습니다"):
            return self.revoked_tokens_ref.document(jwt_payload['jti']).get().exists

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int):
        """Access 토큰과 Refresh 토큰을 모두 Blocklist에 추가합니다."""
        self.add_token_to_blocklist(access_jti, datetime.fromtimestamp(access_exp, tz=timezone.utc))
        self.add_token_to_blocklist(refresh_jti, datetime.fromtimestamp(refresh_exp, tz=timezone.utc))
        logging.info(f"사용자 로그아웃 처리 완료. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")

# 파일 경로: campus_hub/services/google_auth_service.py

import logging
import requests
from google_auth_oauthlib.flow import Flow

class GoogleAuthService:
    """실제 Google OAuth 2.0 통신을 담당하는 서비스 클래스입니다."""
    _user_info_url = "https://www.googleapis.com/oauth2/v3/userinfo"
    _scopes = [
        "https://www.googleapis.com/auth/userinfo.profile",
        "https://www.googleapis.com/auth/userinfo.email",
        "openid"
    ]

    @staticmethod
    def exchange_code_for_user_info(auth_code: str, client_secrets_path: str, redirect_uri: str) -> dict:
        """
        인증 코드를 Access Token으로 교환하고, 이를 사용해 사용자 정보를 가져옵니다.
        반환값 예: {'sub': ..., 'email': ..., 'email_verified': True, 'name': ..., 'picture': ...}
        """
        try:
            # 1. OAuth 2.0 Flow 객체를 생성합니다.
            flow = Flow.from_client_secrets_file(client_secrets_path, scopes=GoogleAuthService._scopes)
            flow.redirect_uri = redirect_uri

            # 2. 인증 코드를 토큰으로 교환합니다.
            flow.fetch_token(code=auth_code)
            credentials = flow.credentials

            # 3. Access Token을 사용하여 사용자 정보를 요청합니다.
            response = requests.get(
                GoogleAuthService._user_info_url,
                headers={"Authorization": f"Bearer {credentials.token}"},
                timeout=10
            )
            response.raise_for_status()
            return response.json()

        except Exception as e:
            logging.error(f"Google OAuth failed: {e}", exc_info=True)
            raise


def is_allowed_email(email: str, allowed_domain: str) -> bool:
    """학교 이메일 도메인(@allowed_domain)으로 끝나는 주소만 허용합니다."""
    if not email or not allowed_domain:
        return False
    return email.strip().lower().endswith(f"@{allowed_domain.lower()}")

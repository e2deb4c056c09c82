# campus_hub/core/exceptions.py
"""
서비스 계층에서 사용하는 도메인 예외.

- NotFoundError: 쓰기 대상(질문, 댓글 등)이 존재하지 않을 때.
  단순 조회에서는 예외 대신 None / 빈 리스트를 반환합니다.
- ForbiddenError: 권한(capability)이나 소유권이 없을 때.
- PersistenceError: Firestore 작업 자체가 실패했을 때. 호출자에게 그대로 전파됩니다.

입력값 검증은 각 도메인의 marshmallow 스키마가 담당합니다.
"""
import logging
from contextlib import contextmanager

from google.api_core import exceptions as gcp_exceptions


class ServiceError(Exception):
    """서비스 계층 예외의 기반 클래스."""

    def __init__(self, message: str, code: str = "SERVICE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ServiceError):
    def __init__(self, message: str = "요청한 리소스를 찾을 수 없습니다."):
        super().__init__(message, "RESOURCE_NOT_FOUND")


class ForbiddenError(ServiceError):
    def __init__(self, message: str = "이 작업을 수행할 권한이 없습니다."):
        super().__init__(message, "FORBIDDEN")


class PersistenceError(ServiceError):
    def __init__(self, message: str = "데이터 저장소 작업에 실패했습니다."):
        super().__init__(message, "PERSISTENCE_ERROR")


@contextmanager
def store_errors(message: str):
    """Firestore 호출에서 발생한 Google API 오류를 PersistenceError 로 바꿔 전파합니다."""
    try:
        yield
    except gcp_exceptions.GoogleAPIError as e:
        logging.error(f"{message}: {e}", exc_info=True)
        raise PersistenceError(message) from e

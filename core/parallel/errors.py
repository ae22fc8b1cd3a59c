"""
core/parallel/errors.py - 작업 실패 분류

병렬 작업에서 발생한 예외를 ErrorCategory와 에러 코드로 분류합니다.
스윕은 재시도를 하지 않으므로 분류 결과는 보고와 종료 코드 판단에만 쓰입니다.

주요 구성 요소:
- categorize_error: 예외를 ErrorCategory로 분류
- get_error_code: 예외에서 에러 코드 추출
- to_task_error: 예외를 TaskError로 변환
"""

from __future__ import annotations

import logging

from core.exceptions import (
    CredentialError,
    ListingError,
    is_access_denied,
    is_expired_token,
    is_not_found,
    is_throttling,
)

from .types import ErrorCategory, TaskError

logger = logging.getLogger(__name__)


def categorize_error(error: BaseException) -> ErrorCategory:
    """예외 객체를 분석하여 ErrorCategory로 분류

    만료 여부를 먼저 확인한 뒤 AWS 에러 코드, 스윕 예외 타입,
    네트워크 예외 순서로 판단합니다.

    Args:
        error: 분류할 예외

    Returns:
        에러 카테고리
    """
    if not isinstance(error, Exception):
        return ErrorCategory.UNKNOWN

    if is_expired_token(error):
        return ErrorCategory.EXPIRED_TOKEN
    if is_throttling(error):
        return ErrorCategory.THROTTLING
    if is_access_denied(error):
        return ErrorCategory.ACCESS_DENIED
    if is_not_found(error):
        return ErrorCategory.NOT_FOUND

    if isinstance(error, CredentialError):
        return ErrorCategory.CREDENTIAL
    if isinstance(error, ListingError):
        return ErrorCategory.LISTING

    if isinstance(error, TimeoutError):
        return ErrorCategory.TIMEOUT
    if isinstance(error, (ConnectionError, OSError)):
        return ErrorCategory.NETWORK

    return ErrorCategory.UNKNOWN


def get_error_code(error: BaseException) -> str:
    """예외 객체에서 에러 코드 문자열 추출

    ListingError는 래핑한 AWS 에러 코드를, ClientError는 response의 Code를,
    그 외에는 예외 클래스명을 반환합니다.
    """
    if isinstance(error, ListingError) and error.error_code:
        return error.error_code
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        code: str = response.get("Error", {}).get("Code", "Unknown")
        return code
    return error.__class__.__name__


def to_task_error(
    error: BaseException,
    identifier: str,
    region: str,
    kind: str = "",
) -> TaskError:
    """예외를 TaskError로 변환"""
    return TaskError(
        identifier=identifier,
        region=region,
        kind=kind,
        category=categorize_error(error),
        error_code=get_error_code(error),
        message=str(error),
        original_exception=error if isinstance(error, Exception) else None,
    )

"""
utils/errors.py

- 서비스 계층에서 발생하는 예상 가능한(복구 가능한) 오류 모음
- 모든 오류는 기계가 읽는 code, 사람이 읽는 message, HTTP status_code,
  선택적인 details(필드 단위 검증 오류 등)를 가짐
- middlewares/error_handler.py가 이 오류들을 공통 응답 포맷으로 변환
"""

from typing import Any, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError


class ServiceError(Exception):
    code = "SERVICE_ERROR"
    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ServiceError):
    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(ServiceError):
    code = "NOT_FOUND"
    status_code = 404


class AuthorizationRequiredError(ServiceError):
    """기준 일수를 넘긴 성적의 수정/삭제에 유효한 승인 코드가 없을 때"""
    code = "AUTHORIZATION_REQUIRED"
    status_code = 403


class NoDataError(ServiceError):
    code = "NO_DATA"
    status_code = 404


class NoGradesError(ServiceError):
    code = "NO_GRADES"
    status_code = 400


class UnauthorizedError(ServiceError):
    code = "UNAUTHORIZED"
    status_code = 403


def parse_payload(schema, payload, message: str = "Validation failed"):
    """
    원시 payload(dict)를 pydantic 스키마로 검증
    - 이미 스키마 인스턴스면 그대로 반환
    - 검증 실패 시 필드 단위 오류를 details에 담은 ValidationError로 변환
    """
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True)
    try:
        return schema.model_validate(payload or {})
    except PydanticValidationError as exc:
        details = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
        raise ValidationError(message, details=details) from exc

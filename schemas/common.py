"""
schemas/common.py

- 프로젝트 전반에서 재사용할 공용 스키마 모음
- Pydantic v2 기준
- 포함 내용:
  1) camelCase 입출력 기본 모델: CamelModel
  2) 에러 응답 표준: ErrorDetail, ErrorResponse
  3) 성공 응답 래퍼: SuccessEnvelope[T], ok()
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =========================================================
# 1) camelCase 기본 모델
# =========================================================

class CamelModel(BaseModel):
    """
    - 외부(JSON)에는 camelCase(studentId), 파이썬 내부에서는 snake_case(student_id)
    - 어느 쪽 이름으로 넘겨도 생성 가능(populate_by_name)
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _as_utc(value: datetime) -> datetime:
    # 시간대 없는 값은 UTC로 간주
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


# =========================================================
# 2) 에러 응답 표준
# =========================================================

class ErrorDetail(BaseModel):
    """에러 코드/메시지를 담는 최소 단위"""
    code: str = Field(..., description="에러 식별 코드 (예: VALIDATION_ERROR, AUTHORIZATION_REQUIRED)")
    message: str = Field(..., description="사람이 읽을 수 있는 에러 메시지")
    details: Optional[Any] = Field(default=None, description="필드 단위 검증 오류 등 부가 정보")


class ErrorResponse(BaseModel):
    """전역 에러 핸들러에서 내려주는 표준 에러 응답"""
    success: bool = False
    error: ErrorDetail

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 3) 성공 응답 래퍼
# =========================================================

T = TypeVar("T")

class SuccessEnvelope(BaseModel, Generic[T]):
    """
    성공 응답 표준 래퍼
    - success: 항상 True
    - data: 실제 데이터(payload)
    """
    success: bool = True
    data: T

    model_config = ConfigDict(extra="ignore")


def ok(data: Any) -> dict:
    """
    라우터에서 바로 리턴할 성공 응답 dict
    - pydantic 모델은 camelCase + JSON 호환 값으로 변환
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    elif isinstance(data, list):
        data = [
            d.model_dump(mode="json", by_alias=True) if isinstance(d, BaseModel) else d
            for d in data
        ]
    return SuccessEnvelope(data=data).model_dump()

"""
schemas/audit_log.py

- 감사 로그 항목과 변경 전/후 스냅샷
- 스냅샷은 entityType 으로 구분되는 태그 유니온 + schemaVersion
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, PositiveInt

from schemas.authorization_codes import AuthorizationCode
from schemas.common import CamelModel, UtcDatetime
from schemas.grades import Grade
from schemas.students import Student


class AuditOperation(str, Enum):
    CREATE = "Inclusão"
    EDIT = "Edição"
    DELETE = "Exclusão"


MASKED_CODE = "********"


class GradeSnapshot(Grade):
    entity_type: Literal["Grade"] = "Grade"
    schema_version: Literal[1] = 1

    @classmethod
    def of(cls, grade: Grade) -> "GradeSnapshot":
        return cls(**grade.model_dump())


class AuthorizationCodeSnapshot(AuthorizationCode):
    entity_type: Literal["AuthorizationCode"] = "AuthorizationCode"
    schema_version: Literal[1] = 1

    @classmethod
    def of(cls, record: AuthorizationCode) -> "AuthorizationCodeSnapshot":
        # 코드 값 자체는 감사 로그에 남기지 않음
        return cls(**{**record.model_dump(), "code": MASKED_CODE})


class StudentSnapshot(Student):
    entity_type: Literal["Student"] = "Student"
    schema_version: Literal[1] = 1

    @classmethod
    def of(cls, student: Student) -> "StudentSnapshot":
        return cls(**student.model_dump())


Snapshot = Annotated[
    Union[GradeSnapshot, AuthorizationCodeSnapshot, StudentSnapshot],
    Field(discriminator="entity_type"),
]


class AuditLogEntry(CamelModel):
    id: int
    user_id: int
    user_name: str
    operation: AuditOperation
    entity_type: str                          # 예: Grade, AuthorizationCode, Student
    entity_id: int
    student_id: Optional[int] = None
    student_name: Optional[str] = None
    previous_data: Optional[Snapshot] = None
    new_data: Optional[Snapshot] = None
    timestamp: UtcDatetime


class AuditLogFilters(CamelModel):
    user_id: Optional[PositiveInt] = None
    operation: Optional[AuditOperation] = None
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    student_id: Optional[PositiveInt] = None


# ✅ 목록 조회 응답 (userId/studentId 제외)
class AuditLogListItem(CamelModel):
    id: int
    user_name: str
    operation: AuditOperation
    entity_type: str
    entity_id: int
    student_name: Optional[str] = None
    previous_data: Optional[Snapshot] = None
    new_data: Optional[Snapshot] = None
    timestamp: UtcDatetime

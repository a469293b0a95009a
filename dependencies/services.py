"""
dependencies/services.py

- 저장소/시계/정책을 한 번 만들어 서비스들에 주입하는 컨테이너
- 라우터는 Depends(get_container) 로 받아 사용 (테스트에서는 dependency_overrides 로 교체)
"""

from dataclasses import dataclass
from functools import lru_cache

from config.policy import GradePolicy
from database.store import build_store
from schemas.audit_log import AuditLogEntry
from schemas.authorization_codes import AuthorizationCode
from schemas.grades import Grade
from schemas.students import Student
from services.audit_log_service import AuditLogService
from services.authorization_code_service import AuthorizationCodeService
from services.grade_service import GradeService
from services.grade_statistics_service import GradeStatisticsService
from services.student_service import StudentService
from utils.context import Clock, SystemClock


@dataclass
class ServiceContainer:
    audit: AuditLogService
    codes: AuthorizationCodeService
    grades: GradeService
    statistics: GradeStatisticsService
    students: StudentService

    @classmethod
    def build(cls, clock: Clock = None, policy: GradePolicy = None, backend: str = None) -> "ServiceContainer":
        clock = clock or SystemClock()
        policy = policy or GradePolicy.from_settings()

        grade_store = build_store("grades", Grade, backend)
        code_store = build_store("authorization_codes", AuthorizationCode, backend)
        student_store = build_store("students", Student, backend)
        audit_store = build_store("audit_log", AuditLogEntry, backend)

        audit = AuditLogService(audit_store, students=student_store)
        codes = AuthorizationCodeService(code_store, audit, clock, policy)
        return cls(
            audit=audit,
            codes=codes,
            grades=GradeService(grade_store, codes, audit, clock, policy),
            statistics=GradeStatisticsService(grade_store, student_store, policy),
            students=StudentService(student_store, audit, clock),
        )


@lru_cache
def get_container() -> ServiceContainer:
    return ServiceContainer.build()

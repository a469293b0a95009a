"""
services/grade_service.py

- 성적 등록/조회/수정/삭제/학생별 이력/일괄 등록
- 등록 후 기준 일수를 넘긴 성적의 수정(30일)·삭제(7일)는 승인 코드가 있어야 가능
  (기준은 항상 최초 등록 시각, 수정해도 다시 계산되지 않음)
- 결석(Ausente) 성적은 저장 시 항상 0점
- 실제로 반영된 변경만 감사 로그에 기록
"""

import logging
from datetime import timedelta
from typing import List

from config.policy import GradePolicy
from database.store import RecordStore
from schemas.audit_log import AuditOperation, GradeSnapshot
from schemas.authorization_codes import AuthorizationOperation
from schemas.grades import (
    AttendanceStatus,
    BatchCreatedGrade,
    Grade,
    GradeBatchCreate,
    GradeBatchResult,
    GradeCreate,
    GradeDelete,
    GradeHistory,
    GradeListFilters,
    GradeUpdate,
)
from services.audit_log_service import AuditLogService
from services.authorization_code_service import AuthorizationCodeService
from services.grade_statistics_service import cohort_average, counted, is_insufficient
from utils.context import Actor, Clock
from utils.errors import (
    AuthorizationRequiredError,
    NoGradesError,
    NotFoundError,
    ValidationError,
    parse_payload,
)

logger = logging.getLogger(__name__)

ENTITY = "Grade"


def effective_value(grade_value: float, attendance_status: AttendanceStatus) -> float:
    return 0.0 if attendance_status == AttendanceStatus.ABSENT else grade_value


class GradeService:
    def __init__(
        self,
        grades: RecordStore[Grade],
        codes: AuthorizationCodeService,
        audit: AuditLogService,
        clock: Clock,
        policy: GradePolicy = None,
    ):
        self.grades = grades
        self.codes = codes
        self.audit = audit
        self.clock = clock
        self.policy = policy or GradePolicy()

    # ==========================================================
    # [내부] 공통
    # ==========================================================
    def _get_or_404(self, grade_id: int) -> Grade:
        grade = self.grades.get(grade_id)
        if grade is None:
            raise NotFoundError("Grade not found")
        return grade

    def age_days(self, grade: Grade) -> int:
        """최초 등록 후 경과 일수 (내림)"""
        return (self.clock.now() - grade.date_created) // timedelta(days=1)

    def _authorize(self, code: str, operation: AuthorizationOperation):
        if not self.codes.validate_and_consume(code, operation):
            raise AuthorizationRequiredError("Invalid or expired authorization code")

    def _insert(self, actor: Actor, **fields) -> Grade:
        now = self.clock.now()
        fields["grade_value"] = effective_value(fields["grade_value"], fields["attendance_status"])
        grade = Grade(id=self.grades.next_id(), date_created=now, date_modified=now, **fields)
        self.grades.add(grade)
        self.audit.append(
            actor,
            AuditOperation.CREATE,
            ENTITY,
            grade.id,
            timestamp=now,
            student_id=grade.student_id,
            new=GradeSnapshot.of(grade),
        )
        return grade

    # ==========================================================
    # [1] 등록 / 조회
    # ==========================================================
    def create(self, actor: Actor, payload) -> Grade:
        data = parse_payload(GradeCreate, payload)
        grade = self._insert(
            actor,
            student_id=data.student_id,
            subject_id=data.subject_id,
            assessment_type=data.assessment_type,
            period=data.period,
            grade_value=data.grade_value,
            assessment_date=data.assessment_date,
            weight=data.weight if data.weight is not None else self.policy.default_weight,
            observations=data.observations,
            attendance_status=data.attendance_status,
        )
        logger.info("grade %s created for student %s", grade.id, grade.student_id)
        return grade

    def get(self, grade_id: int) -> Grade:
        return self._get_or_404(grade_id)

    # ==========================================================
    # [2] 수정 (점수만 변경 가능)
    # ==========================================================
    def update(self, actor: Actor, grade_id: int, payload) -> Grade:
        data = parse_payload(GradeUpdate, payload)
        existing = self._get_or_404(grade_id)

        limit = self.policy.edit_authorization_days
        if self.age_days(existing) > limit:
            if not data.justification or not data.authorization_code:
                logger.warning("edit of grade %s rejected: credentials missing", grade_id)
                raise AuthorizationRequiredError(
                    f"Justification and authorization code required for grades older than {limit} days"
                )
            self._authorize(data.authorization_code, AuthorizationOperation.EDIT_GRADE)

        now = self.clock.now()
        updated = self.grades.update(
            grade_id,
            grade_value=effective_value(data.grade_value, existing.attendance_status),
            date_modified=now,
        )
        if updated is None:
            raise NotFoundError("Grade not found")

        self.audit.append(
            actor,
            AuditOperation.EDIT,
            ENTITY,
            grade_id,
            timestamp=now,
            student_id=existing.student_id,
            previous=GradeSnapshot.of(existing),
            new=GradeSnapshot.of(updated),
        )
        logger.info("grade %s edited: %s -> %s", grade_id, existing.grade_value, updated.grade_value)
        return updated

    # ==========================================================
    # [3] 삭제 (영구 삭제)
    # ==========================================================
    def delete(self, actor: Actor, grade_id: int, payload) -> dict:
        data = parse_payload(GradeDelete, payload)
        existing = self._get_or_404(grade_id)

        limit = self.policy.delete_authorization_days
        if self.age_days(existing) > limit:
            if not data.authorization_code:
                logger.warning("delete of grade %s rejected: authorization code missing", grade_id)
                raise AuthorizationRequiredError(
                    f"Authorization code required for grades older than {limit} days"
                )
            self._authorize(data.authorization_code, AuthorizationOperation.DELETE_GRADE)

        if not self.grades.delete(grade_id):
            raise NotFoundError("Grade not found")

        self.audit.append(
            actor,
            AuditOperation.DELETE,
            ENTITY,
            grade_id,
            timestamp=self.clock.now(),
            student_id=existing.student_id,
            previous=GradeSnapshot.of(existing),
        )
        logger.info("grade %s deleted", grade_id)
        return {"message": "Grade deleted successfully"}

    # ==========================================================
    # [4] 학생별 성적 이력
    # ==========================================================
    def list_by_student(self, student_id: int, filters=None) -> List[GradeHistory]:
        """
        학생 성적 목록 + 행마다 해당 과목·기간 평균
        - 평균은 필터와 무관하게 같은 학생·과목·기간 전체 성적으로 계산
        - 결석 제외 평가가 최소 횟수 미만이면 평균 "N/D"
        """
        if not isinstance(student_id, int) or isinstance(student_id, bool) or student_id <= 0:
            raise ValidationError("Invalid student ID")
        f = parse_payload(GradeListFilters, filters, message="Invalid filters")

        all_grades = self.grades.list(lambda g: g.student_id == student_id)
        rows = [
            g for g in all_grades
            if (f.subject_id is None or g.subject_id == f.subject_id)
            and (f.period is None or g.period == f.period)
        ]

        minimum = self.policy.minimum_assessments
        cohorts = {}
        history = []
        for g in rows:
            key = (g.subject_id, g.period)
            if key not in cohorts:
                cohort = [c for c in all_grades if (c.subject_id, c.period) == key]
                cohorts[key] = (
                    cohort_average(cohort, minimum),
                    is_insufficient(len(counted(cohort)), minimum),
                )
            average, insufficient = cohorts[key]
            history.append(
                GradeHistory(
                    id=g.id,
                    subject_id=g.subject_id,
                    assessment_type=g.assessment_type,
                    period=g.period,
                    grade_value=g.grade_value,
                    assessment_date=g.assessment_date,
                    attendance_status=g.attendance_status,
                    calculated_average=average,
                    insufficient_assessments=insufficient,
                )
            )
        return history

    # ==========================================================
    # [5] 일괄 등록
    # ==========================================================
    def batch_create(self, actor: Actor, payload) -> GradeBatchResult:
        """
        한 번의 평가에 대한 반 전체 성적 등록
        - 항목별로 독립 저장 (중간 실패 시 앞선 항목은 되돌리지 않음)
        """
        data = parse_payload(GradeBatchCreate, payload)
        if not data.grades:
            raise NoGradesError("At least one grade must be provided")

        weight = data.weight if data.weight is not None else self.policy.default_weight
        created = []
        for entry in data.grades:
            grade = self._insert(
                actor,
                student_id=entry.student_id,
                subject_id=data.subject_id,
                assessment_type=data.assessment_type,
                period=data.period,
                grade_value=entry.grade_value,
                assessment_date=data.assessment_date,
                weight=weight,
                observations=None,
                attendance_status=entry.attendance_status,
            )
            created.append(
                BatchCreatedGrade(
                    id=grade.id,
                    student_id=grade.student_id,
                    grade_value=grade.grade_value,
                    attendance_status=grade.attendance_status,
                )
            )

        logger.info(
            "batch of %d grades created (class %s, subject %s, %s)",
            len(created), data.class_id, data.subject_id, data.period.value,
        )
        return GradeBatchResult(created=len(created), grades=created)

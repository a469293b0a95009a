"""
services/grade_statistics_service.py

- 가중 평균 / 평가 횟수 충분 여부 / 반 전체 통계 계산
- 성적 이력 조회(GradeService.list_by_student)도 여기의 가중 평균·충분성 규칙을 그대로 사용
- 저장 데이터는 읽기만 함
"""

import logging
import math
from typing import Iterable, List, Union

from config.policy import GradePolicy
from database.store import RecordStore
from schemas.grades import AttendanceStatus, Grade, NOT_AVAILABLE
from schemas.statistics import (
    GradeStatistics,
    InsufficientStudent,
    StatisticsFilters,
    StudentAverage,
)
from schemas.students import Student
from utils.errors import NoDataError, parse_payload

logger = logging.getLogger(__name__)

DISTRIBUTION_KEYS = [f"{k}-{k + 1}" for k in range(10)]   # "0-1" ~ "9-10"


# ==========================================================
# [공통] 평균 계산 규칙
# ==========================================================
def counted(grades: Iterable[Grade]) -> List[Grade]:
    """평균 계산 대상 (결석 제외)"""
    return [g for g in grades if g.attendance_status != AttendanceStatus.ABSENT]


def weighted_average(grades: Iterable[Grade]) -> float:
    """Σ(점수 × 가중치) / Σ(가중치), 대상이 없으면 0"""
    grades = list(grades)
    total_weight = sum(g.weight for g in grades)
    if total_weight <= 0:
        return 0.0
    return sum(g.grade_value * g.weight for g in grades) / total_weight


def round_half_up(value: float) -> float:
    # 소수 첫째 자리 반올림 (x.x5 → 올림)
    return math.floor(value * 10 + 0.5) / 10


def is_insufficient(count: int, minimum: int) -> bool:
    return count < minimum


def cohort_average(grades: Iterable[Grade], minimum: int) -> Union[float, str]:
    """
    같은 학생·과목·기간 성적 묶음의 표시용 평균
    - 결석 제외 평가가 minimum 미만이면 숫자 대신 "N/D"
    """
    valid = counted(grades)
    if is_insufficient(len(valid), minimum):
        return NOT_AVAILABLE
    return round_half_up(weighted_average(valid))


def distribution(grades: Iterable[Grade]) -> dict:
    """
    점수 정수부 기준 10개 구간 분포
    - 정확히 10.0 인 점수는 "10-11" 구간이 없어 집계되지 않음
    """
    buckets = {key: 0 for key in DISTRIBUTION_KEYS}
    for g in grades:
        lower = math.floor(g.grade_value)
        key = f"{lower}-{lower + 1}"
        if key in buckets:
            buckets[key] += 1
        else:
            logger.warning("grade %s (value %s) has no distribution bucket", g.id, g.grade_value)
    return buckets


# ==========================================================
# [1] 반 전체 통계
# ==========================================================
class GradeStatisticsService:
    def __init__(
        self,
        grades: RecordStore[Grade],
        students: RecordStore[Student],
        policy: GradePolicy = None,
    ):
        self.grades = grades
        self.students = students
        self.policy = policy or GradePolicy()

    def class_statistics(self, filters) -> GradeStatistics:
        f = parse_payload(StatisticsFilters, filters)

        # 반의 재학생
        roster = self.students.list(lambda s: s.class_id == f.class_id and s.active)
        if not roster:
            raise NoDataError("No students found in this class")

        roster_ids = {s.id for s in roster}
        grades = self.grades.list(
            lambda g: g.student_id in roster_ids
            and g.subject_id == f.subject_id
            and (f.period is None or g.period == f.period)
        )
        if not grades:
            raise NoDataError("No grades found for this class/subject")

        # 반 평균/최고/최저: 결석(0점) 포함
        class_average = weighted_average(grades)
        values = [g.grade_value for g in grades]

        minimum = self.policy.minimum_assessments
        student_averages = []
        insufficient = []
        for student in roster:
            student_grades = counted(g for g in grades if g.student_id == student.id)
            average = weighted_average(student_grades)
            row = StudentAverage(
                student_id=student.id,
                student_name=student.name,
                average=average,
                below_minimum=average < self.policy.minimum_passing_grade,
                insufficient_assessments=is_insufficient(len(student_grades), minimum),
            )
            student_averages.append(row)
            if row.insufficient_assessments:
                insufficient.append(
                    InsufficientStudent(
                        student_id=student.id,
                        student_name=student.name,
                        assessment_count=len(student_grades),
                        minimum_required=minimum,
                    )
                )

        logger.info(
            "statistics class=%s subject=%s period=%s: %d grades, %d students",
            f.class_id, f.subject_id, f.period.value if f.period else "-", len(grades), len(roster),
        )
        return GradeStatistics(
            class_average=class_average,
            highest_grade=max(values),
            lowest_grade=min(values),
            distribution=distribution(grades),
            student_averages=student_averages,
            students_with_insufficient_assessments=insufficient,
        )

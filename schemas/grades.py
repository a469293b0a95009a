from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import AfterValidator, Field, PositiveInt

from schemas.common import CamelModel, UtcDatetime


# ✅ 평가 유형
class AssessmentType(str, Enum):
    EXAM = "Prova"
    ASSIGNMENT = "Trabalho"
    PARTICIPATION = "Participação"
    EXERCISE = "Exercício"
    PROJECT = "Projeto"
    OTHER = "Outros"


# ✅ 평가 기간 (4개 학기 구간 + 보충)
class Period(str, Enum):
    FIRST = "1º Bimestre"
    SECOND = "2º Bimestre"
    THIRD = "3º Bimestre"
    FOURTH = "4º Bimestre"
    RECOVERY = "Recuperação"


# ✅ 출결 상태
class AttendanceStatus(str, Enum):
    PRESENT = "Presente"
    ABSENT = "Ausente"
    EXCUSED = "Dispensado"


NOT_AVAILABLE = "N/D"   # 평가 횟수 부족 시 평균 대신 표시


def _one_decimal(value: float) -> float:
    if round(value, 1) != value:
        raise ValueError("Grade must have at most one decimal place")
    return value


GradeValue = Annotated[float, Field(ge=0, le=10), AfterValidator(_one_decimal)]
Weight = Annotated[float, Field(ge=0.5, le=3.0)]
Justification = Annotated[str, Field(min_length=10, max_length=500)]
AuthorizationCodeValue = Annotated[str, Field(min_length=8, max_length=8)]


# ✅ 저장되는 성적 레코드
class Grade(CamelModel):
    id: int                                   # 성적 고유 ID
    student_id: int                           # 학생 ID
    subject_id: int                           # 과목 ID
    assessment_type: AssessmentType           # 평가 유형
    period: Period                            # 평가 기간
    grade_value: float                        # 점수 (0.0 ~ 10.0)
    assessment_date: UtcDatetime              # 평가 일자
    weight: float                             # 가중치 (0.5 ~ 3.0)
    observations: Optional[str] = None        # 비고
    attendance_status: AttendanceStatus = AttendanceStatus.PRESENT
    date_created: UtcDatetime                 # 최초 등록 시각 (승인 기준 일수 계산 기준)
    date_modified: UtcDatetime                # 마지막 수정 시각


# ✅ 등록 요청
class GradeCreate(CamelModel):
    student_id: PositiveInt
    subject_id: PositiveInt
    assessment_type: AssessmentType
    period: Period
    grade_value: GradeValue
    assessment_date: UtcDatetime
    weight: Optional[Weight] = None           # 미지정 시 정책 기본값(1.0)
    observations: Optional[str] = Field(default=None, max_length=500)
    attendance_status: AttendanceStatus = AttendanceStatus.PRESENT


# ✅ 수정 요청 (30일 초과 시 justification + authorizationCode 필수)
class GradeUpdate(CamelModel):
    grade_value: GradeValue
    justification: Optional[Justification] = None
    authorization_code: Optional[AuthorizationCodeValue] = None


# ✅ 삭제 요청 (7일 초과 시 authorizationCode 필수)
class GradeDelete(CamelModel):
    justification: Justification
    authorization_code: Optional[AuthorizationCodeValue] = None


class GradeListFilters(CamelModel):
    subject_id: Optional[PositiveInt] = None
    period: Optional[Period] = None


# ✅ 학생별 성적 이력 행
class GradeHistory(CamelModel):
    id: int
    subject_id: int
    subject_name: Optional[str] = None        # 과목 정보는 외부 시스템 소관
    assessment_type: AssessmentType
    period: Period
    grade_value: float
    assessment_date: UtcDatetime
    attendance_status: AttendanceStatus
    calculated_average: Union[float, Literal["N/D"]]
    insufficient_assessments: bool


# ✅ 일괄 등록
class BatchGradeEntry(CamelModel):
    student_id: PositiveInt
    grade_value: GradeValue
    attendance_status: AttendanceStatus = AttendanceStatus.PRESENT


class GradeBatchCreate(CamelModel):
    class_id: PositiveInt
    subject_id: PositiveInt
    assessment_type: AssessmentType
    period: Period
    assessment_date: UtcDatetime
    weight: Optional[Weight] = None
    grades: List[BatchGradeEntry]


class BatchCreatedGrade(CamelModel):
    id: int
    student_id: int
    grade_value: float
    attendance_status: AttendanceStatus


class GradeBatchResult(CamelModel):
    created: int
    grades: List[BatchCreatedGrade]

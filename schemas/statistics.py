from typing import Dict, List, Optional

from pydantic import PositiveInt

from schemas.common import CamelModel
from schemas.grades import Period


class StatisticsFilters(CamelModel):
    class_id: PositiveInt
    subject_id: PositiveInt
    period: Optional[Period] = None


class StudentAverage(CamelModel):
    student_id: int
    student_name: str
    average: float
    below_minimum: bool                       # 최저 통과 점수 미만
    insufficient_assessments: bool            # 평가 횟수 부족


class InsufficientStudent(CamelModel):
    student_id: int
    student_name: str
    assessment_count: int
    minimum_required: int


class GradeStatistics(CamelModel):
    class_average: float
    highest_grade: float
    lowest_grade: float
    distribution: Dict[str, int]              # "0-1" ~ "9-10" 점수 구간별 개수
    student_averages: List[StudentAverage]
    students_with_insufficient_assessments: List[InsufficientStudent]

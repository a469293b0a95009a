from fastapi import APIRouter, Depends, Query
from typing import Optional

from dependencies.services import ServiceContainer, get_container
from schemas.common import ok

router = APIRouter(prefix="/grade-statistics", tags=["grade-statistics"])


# ✅ [SUMMARY] 반·과목(·기간) 통계: 평균, 최고/최저, 점수 분포, 학생별 평균
@router.get("/")
def get_grade_statistics(
    class_id: Optional[int] = Query(None, alias="classId"),
    subject_id: Optional[int] = Query(None, alias="subjectId"),
    period: Optional[str] = Query(None),
    services: ServiceContainer = Depends(get_container),
):
    filters = {"class_id": class_id, "subject_id": subject_id, "period": period}
    return ok(services.statistics.class_statistics(filters))

from datetime import datetime
from fastapi import APIRouter, Depends, Query
from typing import Optional

from dependencies.services import ServiceContainer, get_container
from schemas.common import ok

router = APIRouter(prefix="/audit-log", tags=["audit-log"])


# ✅ [READ] 감사 로그 조회 (최신순)
@router.get("/")
def list_audit_log(
    user_id: Optional[int] = Query(None, alias="userId"),
    operation: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    student_id: Optional[int] = Query(None, alias="studentId"),
    services: ServiceContainer = Depends(get_container),
):
    # TODO: 코디네이터/관리자는 전체, 교사는 본인 로그만 조회하도록 권한 확인
    filters = {
        "user_id": user_id,
        "operation": operation,
        "start_date": start_date,
        "end_date": end_date,
        "student_id": student_id,
    }
    return ok(services.audit.list(filters))

from fastapi import APIRouter, Depends, Query
from typing import Optional

from dependencies.security import get_current_actor
from dependencies.services import ServiceContainer, get_container
from schemas.common import ok
from schemas.students import StudentCreate
from utils.context import Actor

router = APIRouter(prefix="/students", tags=["학생 정보"])


# ✅ [CREATE] 학생 등록
@router.post("/", status_code=201)
def create_student(
    student: StudentCreate,
    actor: Actor = Depends(get_current_actor),
    services: ServiceContainer = Depends(get_container),
):
    return ok(services.students.create(actor, student))


# ✅ [READ] 재학생 목록 (이름/학번 검색, 반 필터)
@router.get("/")
def read_students(
    search: Optional[str] = Query(None),
    class_id: Optional[int] = Query(None, alias="classId"),
    services: ServiceContainer = Depends(get_container),
):
    return ok(services.students.list({"search": search, "class_id": class_id}))

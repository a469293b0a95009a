from fastapi import APIRouter, Depends, Query
from typing import Optional

from dependencies.security import get_current_actor
from dependencies.services import ServiceContainer, get_container
from schemas.common import ok
from schemas.grades import GradeBatchCreate, GradeCreate, GradeDelete, GradeUpdate
from utils.context import Actor

router = APIRouter(prefix="/grades", tags=["grades"])


# ==========================================================
# [1단계] 등록 라우터
# ==========================================================

# ✅ [CREATE] 성적 등록 (결석이면 0점으로 저장)
@router.post("/", status_code=201)
def create_grade(
    grade: GradeCreate,
    actor: Actor = Depends(get_current_actor),
    services: ServiceContainer = Depends(get_container),
):
    return ok(services.grades.create(actor, grade))


# ✅ [BATCH] 한 평가에 대한 반 전체 성적 일괄 등록
@router.post("/batch", status_code=201)
def batch_create_grades(
    batch: GradeBatchCreate,
    actor: Actor = Depends(get_current_actor),
    services: ServiceContainer = Depends(get_container),
):
    return ok(services.grades.batch_create(actor, batch))


# ==========================================================
# [2단계] 학생 단위 조회
# ==========================================================

# ✅ [READ] 특정 학생의 성적 이력 + 과목·기간별 평균
@router.get("/student/{student_id}")
def list_student_grades(
    student_id: int,
    subject_id: Optional[int] = Query(None, alias="subjectId"),
    period: Optional[str] = Query(None),
    services: ServiceContainer = Depends(get_container),
):
    filters = {"subject_id": subject_id, "period": period}
    return ok(services.grades.list_by_student(student_id, filters))


# ==========================================================
# [3단계] 완전 동적 라우터
# ==========================================================

# ✅ [READ] 특정 성적 조회
@router.get("/{grade_id}")
def read_grade(grade_id: int, services: ServiceContainer = Depends(get_container)):
    return ok(services.grades.get(grade_id))


# ✅ [UPDATE] 점수 수정 (등록 30일 초과 시 승인 코드 필요)
@router.put("/{grade_id}")
def update_grade(
    grade_id: int,
    updated: GradeUpdate,
    actor: Actor = Depends(get_current_actor),
    services: ServiceContainer = Depends(get_container),
):
    return ok(services.grades.update(actor, grade_id, updated))


# ✅ [DELETE] 성적 삭제 (등록 7일 초과 시 승인 코드 필요)
@router.delete("/{grade_id}")
def delete_grade(
    grade_id: int,
    body: GradeDelete,
    actor: Actor = Depends(get_current_actor),
    services: ServiceContainer = Depends(get_container),
):
    return ok(services.grades.delete(actor, grade_id, body))

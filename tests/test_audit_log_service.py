# tests/test_audit_log_service.py

from datetime import datetime, timedelta, timezone

import pytest

from schemas.audit_log import AuditOperation
from utils.errors import ValidationError

START = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def history(grade_service, student_service, teacher, coordinator, grade_payload, clock):
    """학생 등록 → 성적 등록 → 다음 날 수정 → 그다음 날 다른 학생 성적 등록"""
    student = student_service.create(coordinator, {
        "name": "Ana Souza",
        "registrationNumber": "2025001",
        "classId": 1,
        "className": "7º A",
    })
    clock.advance(hours=1)
    grade = grade_service.create(teacher, grade_payload(studentId=student.id))
    clock.advance(days=1)
    grade_service.update(teacher, grade.id, {"gradeValue": 9.0})
    clock.advance(days=1)
    grade_service.create(teacher, grade_payload(studentId=99))
    return student


def test_list_newest_first(audit_service, history):
    entries = audit_service.list()

    assert [e.operation for e in entries] == [
        AuditOperation.CREATE,
        AuditOperation.EDIT,
        AuditOperation.CREATE,
        AuditOperation.CREATE,
    ]
    assert [e.entity_type for e in entries] == ["Grade", "Grade", "Grade", "Student"]
    timestamps = [e.timestamp for e in entries]
    assert timestamps == sorted(timestamps, reverse=True)


def test_list_projection_hides_ids(audit_service, history):
    item = audit_service.list()[0].model_dump(by_alias=True)
    assert "userId" not in item
    assert "studentId" not in item
    assert item["userName"] == "Prof. Ana"


def test_student_name_resolved(audit_service, history):
    edit = audit_service.list({"operation": "Edição"})[0]
    assert edit.student_name == "Ana Souza"

    unknown = audit_service.list({"studentId": 99})[0]
    assert unknown.student_name is None


def test_filter_by_user_and_student(audit_service, history, teacher, coordinator):
    assert len(audit_service.list({"userId": teacher.user_id})) == 3
    assert len(audit_service.list({"userId": coordinator.user_id})) == 1
    assert len(audit_service.list({"studentId": history.id})) == 3
    assert len(audit_service.list({"userId": teacher.user_id, "operation": "Edição"})) == 1


def test_filter_by_date_inclusive(audit_service, history):
    edit_time = START + timedelta(days=1, hours=1)

    exact = audit_service.list({"startDate": edit_time, "endDate": edit_time})
    assert [e.operation for e in exact] == [AuditOperation.EDIT]

    until_edit = audit_service.list({"endDate": edit_time})
    assert len(until_edit) == 3

    naive_start = (START + timedelta(days=2)).replace(tzinfo=None)
    assert len(audit_service.list({"startDate": naive_start})) == 1


def test_invalid_filters(audit_service):
    with pytest.raises(ValidationError):
        audit_service.list({"operation": "Leitura"})
    with pytest.raises(ValidationError):
        audit_service.list({"userId": 0})


def test_entries_are_never_rewritten(audit_service, grade_service, teacher, grade_payload):
    grade = grade_service.create(teacher, grade_payload())
    created = audit_service.store.get(1)
    grade_service.update(teacher, grade.id, {"gradeValue": 3.0})
    grade_service.delete(teacher, grade.id, {"justification": "Lançamento duplicado"})

    assert audit_service.store.get(1) == created
    assert [e.id for e in audit_service.store.list()] == [1, 2, 3]

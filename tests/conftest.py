# tests/conftest.py

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from config.policy import GradePolicy
from dependencies.services import ServiceContainer, get_container
from utils.context import Actor, FrozenClock

START = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FrozenClock(START)


@pytest.fixture
def coordinator():
    return Actor(user_id=1, user_name="Coordinator", role="coordinator")


@pytest.fixture
def teacher():
    return Actor(user_id=7, user_name="Prof. Ana", role="teacher")


@pytest.fixture
def container(clock):
    return ServiceContainer.build(clock=clock, policy=GradePolicy(), backend="memory")


@pytest.fixture
def grade_service(container):
    return container.grades


@pytest.fixture
def code_service(container):
    return container.codes


@pytest.fixture
def audit_service(container):
    return container.audit


@pytest.fixture
def statistics_service(container):
    return container.statistics


@pytest.fixture
def student_service(container):
    return container.students


@pytest.fixture
def grade_payload():
    def make(**overrides):
        payload = {
            "studentId": 10,
            "subjectId": 2,
            "assessmentType": "Prova",
            "period": "1º Bimestre",
            "gradeValue": 7.5,
            "assessmentDate": "2025-03-01T00:00:00Z",
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture
def issue_code(code_service, coordinator):
    def issue(operation="Edição de Nota", validity="24 horas", teacher_id=7):
        issued = code_service.generate(coordinator, {
            "teacherId": teacher_id,
            "operationType": operation,
            "justification": "Correção de lançamento incorreto",
            "validity": validity,
        })
        return issued.code

    return issue


@pytest.fixture
def client(container):
    from main import app

    app.dependency_overrides[get_container] = lambda: container
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

# tests/test_authorization_code_service.py

import re
import threading
from datetime import timedelta

import pytest

from config.policy import GradePolicy
from schemas.audit_log import MASKED_CODE
from schemas.authorization_codes import AuthorizationOperation
from services.authorization_code_service import AuthorizationCodeService
from utils.context import Actor
from utils.errors import UnauthorizedError, ValidationError

EDIT = AuthorizationOperation.EDIT_GRADE
DELETE = AuthorizationOperation.DELETE_GRADE


def test_generate_returns_code_and_expiration(code_service, coordinator, clock):
    issued = code_service.generate(coordinator, {
        "teacherId": 7,
        "operationType": "Edição de Nota",
        "justification": "Correção de lançamento incorreto",
    })

    assert re.fullmatch(r"[A-Z0-9]{8}", issued.code)
    assert issued.teacher_id == 7
    assert issued.operation_type == EDIT
    assert issued.expires_at == clock.now() + timedelta(hours=24)


@pytest.mark.parametrize("validity, hours", [("6 horas", 6), ("12 horas", 12), ("24 horas", 24)])
def test_generate_validity_periods(code_service, coordinator, clock, validity, hours):
    issued = code_service.generate(coordinator, {
        "teacherId": 7,
        "operationType": "Exclusão de Nota",
        "justification": "Nota lançada para o aluno errado",
        "validity": validity,
    })
    assert issued.expires_at - clock.now() == timedelta(hours=hours)


def test_generate_persists_unused_record(code_service, issue_code):
    code = issue_code()
    record = code_service.store.find_one(lambda r: r.code == code)
    assert record is not None
    assert record.used is False


def test_generate_audit_entry_masks_code(code_service, audit_service, issue_code):
    code = issue_code()

    entries = audit_service.store.list()
    assert len(entries) == 1
    entry = entries[0]
    assert entry.entity_type == "AuthorizationCode"
    assert entry.previous_data is None
    assert entry.new_data.code == MASKED_CODE
    assert entry.student_id is None
    assert code not in entry.model_dump_json()


@pytest.mark.parametrize("payload", [
    {"teacherId": 7, "operationType": "Edição de Nota", "justification": "curta"},
    {"teacherId": 7, "operationType": "Outra Operação", "justification": "Justificativa suficiente"},
    {"teacherId": 0, "operationType": "Edição de Nota", "justification": "Justificativa suficiente"},
    {"teacherId": 7, "operationType": "Edição de Nota", "justification": "x" * 501},
    {"teacherId": 7, "operationType": "Edição de Nota", "justification": "Justificativa suficiente",
     "validity": "48 horas"},
])
def test_generate_rejects_invalid_input(code_service, coordinator, payload):
    with pytest.raises(ValidationError) as exc_info:
        code_service.generate(coordinator, payload)
    assert exc_info.value.details


def test_generate_requires_coordinator(code_service, teacher):
    with pytest.raises(UnauthorizedError):
        code_service.generate(teacher, {
            "teacherId": 7,
            "operationType": "Edição de Nota",
            "justification": "Correção de lançamento incorreto",
        })


def test_validate_matching_operation_only(code_service, issue_code):
    edit_code = issue_code("Edição de Nota")
    delete_code = issue_code("Exclusão de Nota")

    assert code_service.validate(edit_code, EDIT)
    assert not code_service.validate(edit_code, DELETE)
    assert code_service.validate(delete_code, DELETE)
    assert not code_service.validate(delete_code, EDIT)


def test_validate_is_pure(code_service, issue_code):
    code = issue_code()
    assert code_service.validate(code, EDIT)
    assert code_service.validate(code, EDIT)


def test_validate_unknown_code(code_service):
    assert not code_service.validate("ZZZZZZZZ", EDIT)
    assert not code_service.validate("", EDIT)


def test_code_expires_at_expiration_instant(code_service, issue_code, clock):
    code = issue_code(validity="6 horas")

    clock.advance(hours=5, minutes=59)
    assert code_service.validate(code, EDIT)

    clock.advance(minutes=1)
    assert not code_service.validate(code, EDIT)


def test_consume_once(code_service, issue_code):
    code = issue_code()

    assert code_service.consume(code)
    assert not code_service.consume(code)
    assert not code_service.validate(code, EDIT)


def test_consume_unknown_code(code_service):
    assert not code_service.consume("ABCDEFGH")


def test_validate_and_consume(code_service, issue_code):
    code = issue_code()

    assert not code_service.validate_and_consume(code, DELETE)
    assert code_service.validate(code, EDIT)

    assert code_service.validate_and_consume(code, EDIT)
    assert not code_service.validate_and_consume(code, EDIT)


def test_validate_and_consume_expired(code_service, issue_code, clock):
    code = issue_code()
    clock.advance(hours=25)

    assert not code_service.validate_and_consume(code, EDIT)
    record = code_service.store.find_one(lambda r: r.code == code)
    assert record.used is False


def test_concurrent_consumers_single_winner(code_service, issue_code):
    code = issue_code()
    barrier = threading.Barrier(8)
    results = []
    results_lock = threading.Lock()

    def worker():
        barrier.wait()
        outcome = code_service.validate_and_consume(code, EDIT)
        with results_lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert results.count(False) == 7


def test_generate_open_to_any_role_when_configured(code_service, audit_service, clock):
    service = AuthorizationCodeService(
        code_service.store, audit_service, clock, GradePolicy(coordinator_only_codes=False)
    )
    issued = service.generate(Actor(user_id=1, user_name="Secretaria"), {
        "teacherId": 7,
        "operationType": "Edição de Nota",
        "justification": "Correção de lançamento incorreto",
    })
    assert service.validate(issued.code, EDIT)


def test_unknown_codes_leave_no_state_behind(code_service):
    state_before = dict(vars(code_service))

    for i in range(500):
        assert not code_service.validate_and_consume(f"{i:08d}", EDIT)
        assert not code_service.consume(f"X{i:07d}")

    assert vars(code_service) == state_before
    assert code_service.store.list() == []


def test_validate_skips_spent_record_sharing_the_code(code_service, issue_code):
    code = issue_code("Edição de Nota")
    spent = code_service.store.find_one(lambda r: r.code == code)
    code_service.store.update(spent.id, used=True)
    code_service.store.add(spent.model_copy(update={"id": code_service.store.next_id(), "used": False}))

    assert code_service.validate(code, EDIT)
    assert code_service.validate_and_consume(code, EDIT)
    assert not code_service.validate(code, EDIT)

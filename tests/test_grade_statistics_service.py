# tests/test_grade_statistics_service.py

import logging

import pytest

from services.grade_statistics_service import (
    DISTRIBUTION_KEYS,
    distribution,
    round_half_up,
    weighted_average,
)
from utils.errors import NoDataError, ValidationError


@pytest.fixture
def enroll(student_service, coordinator):
    def make(name, class_id=1, active=True):
        return student_service.create(coordinator, {
            "name": name,
            "registrationNumber": f"RA-{name}",
            "classId": class_id,
            "className": f"Turma {class_id}",
            "active": active,
        })

    return make


@pytest.fixture
def add_grade(grade_service, teacher, grade_payload):
    def make(student_id, value, **overrides):
        return grade_service.create(teacher, grade_payload(studentId=student_id, gradeValue=value, **overrides))

    return make


def test_single_grade(statistics_service, enroll, add_grade):
    ana = enroll("Ana")
    add_grade(ana.id, 7.0)

    stats = statistics_service.class_statistics({"classId": 1, "subjectId": 2})

    assert stats.class_average == 7.0
    assert stats.highest_grade == stats.lowest_grade == 7.0
    assert stats.distribution["7-8"] == 1
    assert sum(stats.distribution.values()) == 1
    assert len(stats.student_averages) == 1
    row = stats.student_averages[0]
    assert (row.average, row.below_minimum, row.insufficient_assessments) == (7.0, False, True)
    assert stats.students_with_insufficient_assessments[0].assessment_count == 1
    assert stats.students_with_insufficient_assessments[0].minimum_required == 3


def test_no_active_students(statistics_service, enroll):
    enroll("Bruno", active=False)
    with pytest.raises(NoDataError) as exc_info:
        statistics_service.class_statistics({"classId": 1, "subjectId": 2})
    assert exc_info.value.message == "No students found in this class"


def test_no_matching_grades(statistics_service, enroll, add_grade):
    ana = enroll("Ana")
    add_grade(ana.id, 8.0, subjectId=3)
    add_grade(ana.id, 8.0, period="2º Bimestre")

    with pytest.raises(NoDataError) as exc_info:
        statistics_service.class_statistics({"classId": 1, "subjectId": 3, "period": "3º Bimestre"})
    assert exc_info.value.message == "No grades found for this class/subject"


def test_requires_class_and_subject(statistics_service):
    with pytest.raises(ValidationError):
        statistics_service.class_statistics({"classId": 1})
    with pytest.raises(ValidationError):
        statistics_service.class_statistics({"classId": 1, "subjectId": 2, "period": "Anual"})


def test_only_roster_grades_count(statistics_service, enroll, add_grade):
    ana = enroll("Ana")
    other = enroll("Carla", class_id=2)
    retired = enroll("Davi", active=False)
    add_grade(ana.id, 6.0)
    add_grade(other.id, 2.0)
    add_grade(retired.id, 1.0)

    stats = statistics_service.class_statistics({"classId": 1, "subjectId": 2})

    assert stats.lowest_grade == 6.0
    assert [s.student_id for s in stats.student_averages] == [ana.id]


def test_absent_counts_for_class_but_not_student(statistics_service, enroll, add_grade):
    ana = enroll("Ana")
    for value in (8.0, 8.0, 8.0):
        add_grade(ana.id, value)
    add_grade(ana.id, 9.0, attendanceStatus="Ausente")

    stats = statistics_service.class_statistics({"classId": 1, "subjectId": 2})

    assert stats.class_average == pytest.approx(6.0)
    assert stats.lowest_grade == 0.0
    assert stats.distribution["0-1"] == 1
    row = stats.student_averages[0]
    assert row.average == 8.0
    assert row.insufficient_assessments is False
    assert stats.students_with_insufficient_assessments == []


def test_student_without_grades(statistics_service, enroll, add_grade):
    ana = enroll("Ana")
    bia = enroll("Bia")
    add_grade(ana.id, 9.0)

    stats = statistics_service.class_statistics({"classId": 1, "subjectId": 2})

    row = next(s for s in stats.student_averages if s.student_id == bia.id)
    assert row.average == 0
    assert row.below_minimum is True
    assert row.insufficient_assessments is True
    flagged = {s.student_id: s.assessment_count for s in stats.students_with_insufficient_assessments}
    assert flagged == {ana.id: 1, bia.id: 0}


def test_period_filter(statistics_service, enroll, add_grade):
    ana = enroll("Ana")
    add_grade(ana.id, 4.0)
    add_grade(ana.id, 9.0, period="2º Bimestre")

    all_periods = statistics_service.class_statistics({"classId": 1, "subjectId": 2})
    second = statistics_service.class_statistics({"classId": 1, "subjectId": 2, "period": "2º Bimestre"})

    assert all_periods.class_average == 6.5
    assert second.class_average == 9.0
    assert second.student_averages[0].below_minimum is False


def test_weighted_class_average(statistics_service, enroll, add_grade):
    ana = enroll("Ana")
    bia = enroll("Bia")
    add_grade(ana.id, 10.0, weight=3.0)
    add_grade(bia.id, 2.0, weight=1.0)

    stats = statistics_service.class_statistics({"classId": 1, "subjectId": 2})

    assert stats.class_average == pytest.approx(8.0)
    assert stats.highest_grade == 10.0


def test_perfect_score_missing_from_distribution(statistics_service, enroll, add_grade, caplog):
    ana = enroll("Ana")
    add_grade(ana.id, 10.0)
    add_grade(ana.id, 9.5)

    with caplog.at_level(logging.WARNING, logger="services.grade_statistics_service"):
        stats = statistics_service.class_statistics({"classId": 1, "subjectId": 2})

    assert stats.highest_grade == 10.0
    assert stats.distribution["9-10"] == 1
    assert "10-11" not in stats.distribution
    assert sum(stats.distribution.values()) == 1
    assert "no distribution bucket" in caplog.text


def test_distribution_keys():
    assert DISTRIBUTION_KEYS[0] == "0-1"
    assert DISTRIBUTION_KEYS[-1] == "9-10"
    assert distribution([]) == {key: 0 for key in DISTRIBUTION_KEYS}


@pytest.mark.parametrize("value, expected", [
    (6.25, 6.3),
    (6.24, 6.2),
    (7.0, 7.0),
    (0.05, 0.1),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_weighted_average_scale_invariant(grade_service, teacher, grade_payload):
    grades = [
        grade_service.create(teacher, grade_payload(gradeValue=value, weight=weight))
        for value, weight in ((4.0, 1.0), (9.0, 2.0), (6.5, 0.5))
    ]
    doubled = [g.model_copy(update={"weight": g.weight * 2}) for g in grades]

    assert weighted_average(doubled) == pytest.approx(weighted_average(grades))
    assert weighted_average([]) == 0.0

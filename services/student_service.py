import logging
from typing import List

from database.store import RecordStore
from schemas.audit_log import AuditOperation, StudentSnapshot
from schemas.students import Student, StudentCreate, StudentListFilters, StudentListItem
from services.audit_log_service import AuditLogService
from utils.context import Actor, Clock
from utils.errors import parse_payload

logger = logging.getLogger(__name__)


class StudentService:
    """학생 명단 (통계 계산 시 반 재학생 기준)"""

    def __init__(self, store: RecordStore[Student], audit: AuditLogService, clock: Clock):
        self.store = store
        self.audit = audit
        self.clock = clock

    def create(self, actor: Actor, payload) -> Student:
        data = parse_payload(StudentCreate, payload)
        now = self.clock.now()
        student = Student(id=self.store.next_id(), date_created=now, date_modified=now, **data.model_dump())
        self.store.add(student)
        self.audit.append(
            actor,
            AuditOperation.CREATE,
            "Student",
            student.id,
            timestamp=now,
            student_id=student.id,
            new=StudentSnapshot.of(student),
        )
        logger.info("student %s registered in class %s", student.id, student.class_id)
        return student

    def list(self, filters=None) -> List[StudentListItem]:
        """재학생만, 이름/학번 검색(대소문자 무시), 이름순"""
        f = parse_payload(StudentListFilters, filters)
        search = f.search.lower() if f.search else None

        def matches(s: Student) -> bool:
            if not s.active:
                return False
            if search and search not in s.name.lower() and search not in s.registration_number.lower():
                return False
            if f.class_id is not None and s.class_id != f.class_id:
                return False
            return True

        students = sorted(self.store.list(matches), key=lambda s: s.name)
        return [
            StudentListItem(
                id=s.id,
                name=s.name,
                registration_number=s.registration_number,
                class_name=s.class_name,
                active=s.active,
            )
            for s in students
        ]

"""
services/audit_log_service.py

- 모든 변경(등록/수정/삭제)을 추가 전용으로 기록하는 감사 로그
- 항목은 생성 후 수정/삭제되지 않음
- 실제로 반영된 변경에 대해서만 append 를 호출해야 함
"""

import logging
from datetime import datetime
from typing import List, Optional

from database.store import RecordStore
from schemas.audit_log import AuditLogEntry, AuditLogFilters, AuditLogListItem, AuditOperation
from utils.context import Actor
from utils.errors import parse_payload

logger = logging.getLogger(__name__)


class AuditLogService:
    def __init__(self, store: RecordStore[AuditLogEntry], students: Optional[RecordStore] = None):
        self.store = store
        self.students = students

    def _student_name(self, student_id: Optional[int]) -> Optional[str]:
        if student_id is None or self.students is None:
            return None
        student = self.students.get(student_id)
        return student.name if student else None

    def append(
        self,
        actor: Actor,
        operation: AuditOperation,
        entity_type: str,
        entity_id: int,
        timestamp: datetime,
        student_id: Optional[int] = None,
        previous=None,
        new=None,
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            id=self.store.next_id(),
            user_id=actor.user_id,
            user_name=actor.user_name,
            operation=operation,
            entity_type=entity_type,
            entity_id=entity_id,
            student_id=student_id,
            student_name=self._student_name(student_id),
            previous_data=previous,
            new_data=new,
            timestamp=timestamp,
        )
        self.store.add(entry)
        logger.debug("audit %s %s#%s by user %s", operation.value, entity_type, entity_id, actor.user_id)
        return entry

    def list(self, filters=None) -> List[AuditLogListItem]:
        """조건(모두 AND)에 맞는 로그를 최신순으로 반환"""
        f = parse_payload(AuditLogFilters, filters)

        def matches(entry: AuditLogEntry) -> bool:
            if f.user_id is not None and entry.user_id != f.user_id:
                return False
            if f.operation is not None and entry.operation != f.operation:
                return False
            if f.start_date is not None and entry.timestamp < f.start_date:
                return False
            if f.end_date is not None and entry.timestamp > f.end_date:
                return False
            if f.student_id is not None and entry.student_id != f.student_id:
                return False
            return True

        entries = sorted(self.store.list(matches), key=lambda e: e.timestamp, reverse=True)
        return [
            AuditLogListItem(
                id=e.id,
                user_name=e.user_name,
                operation=e.operation,
                entity_type=e.entity_type,
                entity_id=e.entity_id,
                student_name=e.student_name,
                previous_data=e.previous_data,
                new_data=e.new_data,
                timestamp=e.timestamp,
            )
            for e in entries
        ]

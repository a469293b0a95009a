"""
services/authorization_code_service.py

- 오래된 성적의 수정/삭제에 필요한 1회용 승인 코드 발급·검증·사용 처리
- 코드는 발급된 작업 유형(수정/삭제)에만 유효하고, 사용 또는 만료 후에는 다시 쓸 수 없음
- validate_and_consume: 검증과 사용 처리를 저장소 compare_and_set 한 번으로 수행
"""

import logging
import secrets
import string
from datetime import timedelta

from config.policy import GradePolicy
from database.store import RecordStore
from schemas.audit_log import AuditOperation, AuthorizationCodeSnapshot
from schemas.authorization_codes import (
    AuthorizationCode,
    AuthorizationCodeGenerate,
    AuthorizationCodeIssued,
    AuthorizationOperation,
)
from services.audit_log_service import AuditLogService
from utils.context import Actor, Clock
from utils.errors import UnauthorizedError, parse_payload

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def mask(code: str) -> str:
    return code[:2] + "*" * max(len(code) - 2, 0) if code else ""


class AuthorizationCodeService:
    def __init__(
        self,
        store: RecordStore[AuthorizationCode],
        audit: AuditLogService,
        clock: Clock,
        policy: GradePolicy = None,
    ):
        self.store = store
        self.audit = audit
        self.clock = clock
        self.policy = policy or GradePolicy()

    # ==========================================================
    # [내부] 코드 생성 / 사용 가능 여부
    # ==========================================================
    def _new_code(self) -> str:
        return "".join(secrets.choice(CODE_ALPHABET) for _ in range(self.policy.code_length))

    def _is_usable(self, record: AuthorizationCode, code: str, operation: AuthorizationOperation) -> bool:
        return (
            record.code == code
            and not record.used
            and record.operation_type == operation
            and self.clock.now() < record.expires_at
        )

    # ==========================================================
    # [1] 발급
    # ==========================================================
    def generate(self, actor: Actor, payload) -> AuthorizationCodeIssued:
        """
        승인 코드 발급 (기본값: 코디네이터만 가능, policy.coordinator_only_codes)
        - expiresAt = 현재 시각 + 유효 기간(6/12/24시간, 기본 24시간)
        - 감사 로그에는 코드 값을 가린 스냅샷만 기록
        - 기존 코드와의 중복 검사는 하지 않음 (36^8 조합 + 짧은 유효 기간)
        """
        data = parse_payload(AuthorizationCodeGenerate, payload)
        if self.policy.coordinator_only_codes and not actor.is_coordinator:
            raise UnauthorizedError("Only coordinators can generate authorization codes")

        now = self.clock.now()
        record = AuthorizationCode(
            id=self.store.next_id(),
            code=self._new_code(),
            teacher_id=data.teacher_id,
            operation_type=data.operation_type,
            justification=data.justification,
            expires_at=now + timedelta(hours=data.validity.hours),
            used=False,
            date_created=now,
        )
        self.store.add(record)

        self.audit.append(
            actor,
            AuditOperation.CREATE,
            "AuthorizationCode",
            record.id,
            timestamp=now,
            new=AuthorizationCodeSnapshot.of(record),
        )
        logger.info(
            "authorization code %s issued to teacher %s for %s (valid %s)",
            mask(record.code), record.teacher_id, record.operation_type.value, data.validity.value,
        )
        # TODO: 교사에게 코드 발급 알림 발송 (알림 서비스 연동 후)

        return AuthorizationCodeIssued(
            code=record.code,
            expires_at=record.expires_at,
            teacher_id=record.teacher_id,
            operation_type=record.operation_type,
        )

    # ==========================================================
    # [2] 검증 / 사용 처리
    # ==========================================================
    def validate(self, code: str, operation: AuthorizationOperation) -> bool:
        """존재 + 미사용 + 작업 유형 일치 + 만료 전 이면 True (상태 변경 없음)"""
        if not code:
            return False
        return self.store.find_one(lambda r: self._is_usable(r, code, operation)) is not None

    def consume(self, code: str) -> bool:
        """미사용 코드를 사용 처리. 없거나 이미 사용된 코드는 False"""
        if not code:
            return False
        updated = self.store.compare_and_set(lambda r: r.code == code and not r.used, used=True)
        return updated is not None

    def validate_and_consume(self, code: str, operation: AuthorizationOperation) -> bool:
        """
        검증과 사용 처리를 저장소의 compare_and_set 한 번으로 수행
        - 같은 코드로 동시에 들어온 두 요청 중 하나만 True
        """
        if not code:
            return False
        updated = self.store.compare_and_set(lambda r: self._is_usable(r, code, operation), used=True)
        if updated is None:
            logger.warning("authorization code %s rejected for %s", mask(code), operation.value)
            return False
        logger.info("authorization code %s consumed for %s", mask(code), operation.value)
        return True

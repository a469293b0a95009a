"""
utils/context.py

- 모든 서비스 호출에 명시적으로 넘기는 "현재 시각"과 "요청자" 정보
- SystemClock: 실제 UTC 시각 / FrozenClock: 고정·이동 가능한 시각(테스트, 재현용)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    def __init__(self, at: datetime):
        self._at = at

    def now(self) -> datetime:
        return self._at

    def advance(self, **kwargs):
        self._at = self._at + timedelta(**kwargs)


@dataclass(frozen=True)
class Actor:
    user_id: int
    user_name: str
    role: str = "teacher"

    @property
    def is_coordinator(self) -> bool:
        return self.role == "coordinator"

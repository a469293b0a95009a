"""
database/store.py

- 성적/승인 코드/학생/감사 로그가 공통으로 쓰는 레코드 저장소 포트(RecordStore)
- 레코드는 정수 id를 가진 pydantic 모델
- 구현체
  1) InMemoryRecordStore: 프로세스 내 dict 컬렉션
  2) SqlRecordStore: SQLAlchemy records 테이블 (컬렉션 + id + JSON payload)
- compare_and_set: 조건 확인과 변경을 하나의 임계 구역에서 수행 (승인 코드 1회 사용 보장에 사용)
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select

from config.settings import settings
from database.db import init_db, make_engine, make_session_factory
from models.records import RecordRow

T = TypeVar("T", bound=BaseModel)

Predicate = Callable[[T], bool]


class RecordStore(ABC, Generic[T]):
    """레코드 저장소 포트: 서비스는 이 인터페이스만 알고 있음"""

    def __init__(self, model: Type[T]):
        self.model = model
        self._lock = threading.RLock()

    @abstractmethod
    def next_id(self) -> int: ...

    @abstractmethod
    def add(self, record: T) -> T: ...

    @abstractmethod
    def get(self, id: int) -> Optional[T]: ...

    @abstractmethod
    def update(self, id: int, **changes) -> Optional[T]: ...

    @abstractmethod
    def delete(self, id: int) -> bool: ...

    @abstractmethod
    def list(self, predicate: Optional[Predicate] = None) -> List[T]: ...

    @abstractmethod
    def compare_and_set(self, predicate: Predicate, **changes) -> Optional[T]: ...

    @abstractmethod
    def clear(self): ...

    def find_one(self, predicate: Predicate) -> Optional[T]:
        for record in self.list(predicate):
            return record
        return None

    def exists(self, id: int) -> bool:
        return self.get(id) is not None


# ==========================================================
# [1] 메모리 저장소
# ==========================================================
class InMemoryRecordStore(RecordStore[T]):
    def __init__(self, model: Type[T]):
        super().__init__(model)
        self._records = {}
        self._current_id = 0

    def next_id(self) -> int:
        with self._lock:
            self._current_id += 1
            return self._current_id

    def add(self, record: T) -> T:
        with self._lock:
            self._records[record.id] = record.model_copy(deep=True)
            self._current_id = max(self._current_id, record.id)
        return record

    def get(self, id: int) -> Optional[T]:
        with self._lock:
            record = self._records.get(id)
            return record.model_copy(deep=True) if record else None

    def update(self, id: int, **changes) -> Optional[T]:
        with self._lock:
            existing = self._records.get(id)
            if existing is None:
                return None
            updated = existing.model_copy(update=changes, deep=True)
            self._records[id] = updated
            return updated.model_copy(deep=True)

    def delete(self, id: int) -> bool:
        with self._lock:
            return self._records.pop(id, None) is not None

    def list(self, predicate: Optional[Predicate] = None) -> List[T]:
        with self._lock:
            records = [self._records[key] for key in sorted(self._records)]
            return [
                r.model_copy(deep=True)
                for r in records
                if predicate is None or predicate(r)
            ]

    def compare_and_set(self, predicate: Predicate, **changes) -> Optional[T]:
        with self._lock:
            for key in sorted(self._records):
                if predicate(self._records[key]):
                    return self.update(key, **changes)
            return None

    def clear(self):
        with self._lock:
            self._records.clear()
            self._current_id = 0


# ==========================================================
# [2] SQLAlchemy 저장소
# ==========================================================
class SqlRecordStore(RecordStore[T]):
    def __init__(self, model: Type[T], collection: str, session_factory):
        super().__init__(model)
        self.collection = collection
        self.session_factory = session_factory
        self._current_id = 0

    # 모델 ↔ JSON payload 변환
    def _load(self, row) -> T:
        return self.model.model_validate(row.payload)

    def _dump(self, record: T) -> dict:
        return record.model_dump(mode="json", by_alias=True)

    def _select(self, for_update: bool = False):
        stmt = (
            select(RecordRow)
            .where(RecordRow.collection == self.collection)
            .order_by(RecordRow.id)
        )
        return stmt.with_for_update() if for_update else stmt

    def _rows(self, db, for_update: bool = False):
        return db.execute(self._select(for_update)).scalars().all()

    def _row(self, db, id: int):
        return db.get(RecordRow, (self.collection, id))

    def next_id(self) -> int:
        with self._lock, self.session_factory() as db:
            stmt = select(func.max(RecordRow.id)).where(RecordRow.collection == self.collection)
            stored_max = db.execute(stmt).scalar() or 0
            self._current_id = max(self._current_id, stored_max) + 1
            return self._current_id

    def add(self, record: T) -> T:
        with self._lock, self.session_factory() as db:
            db.add(RecordRow(collection=self.collection, id=record.id, payload=self._dump(record)))
            db.commit()
        return record

    def get(self, id: int) -> Optional[T]:
        with self.session_factory() as db:
            row = self._row(db, id)
            return self._load(row) if row else None

    def update(self, id: int, **changes) -> Optional[T]:
        with self._lock, self.session_factory() as db:
            row = self._row(db, id)
            if row is None:
                return None
            updated = self._load(row).model_copy(update=changes)
            row.payload = self._dump(updated)
            db.commit()
            return updated

    def delete(self, id: int) -> bool:
        with self._lock, self.session_factory() as db:
            row = self._row(db, id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    def list(self, predicate: Optional[Predicate] = None) -> List[T]:
        with self.session_factory() as db:
            records = [self._load(row) for row in self._rows(db)]
        return [r for r in records if predicate is None or predicate(r)]

    def compare_and_set(self, predicate: Predicate, **changes) -> Optional[T]:
        # 조회와 변경을 같은 트랜잭션 + 같은 락 안에서 수행
        # 여러 프로세스가 같은 DB를 쓰면 SELECT ... FOR UPDATE 행 잠금에 의존
        # (sqlite 는 FOR UPDATE 를 무시하므로 단일 프로세스 전제)
        with self._lock, self.session_factory() as db:
            for row in self._rows(db, for_update=True):
                current = self._load(row)
                if predicate(current):
                    updated = current.model_copy(update=changes)
                    row.payload = self._dump(updated)
                    db.commit()
                    return updated
            return None

    def clear(self):
        with self._lock, self.session_factory() as db:
            db.query(RecordRow).filter(RecordRow.collection == self.collection).delete()
            db.commit()
            self._current_id = 0


# ==========================================================
# [3] 설정 기반 저장소 생성
# ==========================================================
_session_factory = None


def get_session_factory():
    global _session_factory
    if _session_factory is None:
        engine = make_engine()
        init_db(engine)
        _session_factory = make_session_factory(engine)
    return _session_factory


def build_store(collection: str, model: Type[T], backend: str = None) -> RecordStore[T]:
    """settings.STORAGE_BACKEND 에 맞는 저장소 생성"""
    backend = backend or settings.STORAGE_BACKEND
    if backend == "sql":
        return SqlRecordStore(model, collection, get_session_factory())
    return InMemoryRecordStore(model)

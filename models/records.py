from sqlalchemy import Column, DateTime, Integer, JSON, String, func
from database.db import Base


class RecordRow(Base):
    __tablename__ = "records"  # 컬렉션별 레코드 저장 테이블 (성적, 승인 코드, 학생, 감사 로그)

    collection = Column(String(50), primary_key=True)                 # 컬렉션 이름 (예: grades)
    id = Column(Integer, primary_key=True, autoincrement=False)       # 컬렉션 내 고유 ID
    payload = Column(JSON, nullable=False)                            # 레코드 본문 (JSON 직렬화)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())  # 마지막 저장 시각

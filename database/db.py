from sqlalchemy import create_engine               # SQLAlchemy 엔진 생성 도구
from sqlalchemy.orm import declarative_base        # 모델의 Base 클래스
from sqlalchemy.orm import sessionmaker            # 세션 팩토리 함수

from config.settings import settings               # ✅ 환경변수 설정 파일 불러오기

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


def make_engine(url: str = None, **kwargs):
    """
    DB 엔진 생성
    - url 미지정 시 settings.DATABASE_URL 사용
    - sqlite는 여러 스레드에서 같은 연결을 쓰도록 check_same_thread 해제
    """
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, **kwargs)


def make_session_factory(engine):
    # ✅ 세션 팩토리: DB 연결에 사용할 세션 생성기 정의
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine):
    """records 테이블 생성 (없을 때만)"""
    import models.records  # noqa: F401  테이블 메타데이터 등록

    Base.metadata.create_all(bind=engine)

"""
config/settings.py

- .env에 정의한 환경변수를 읽어 애플리케이션 전역 설정으로 제공합니다.
- pydantic v2 / pydantic-settings v2 사용.
- 성적 정책 값(수정/삭제 승인 기준 일수, 최소 평가 횟수, 최저 통과 점수)은
  서비스 생성 시 GradePolicy로 묶어서 주입합니다.
"""

from typing import List, Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # =========================
    # 앱/런타임
    # =========================
    ENV: Literal["dev", "stage", "prod"] = "dev"
    APP_TITLE: str = "Grade Records API"
    APP_DESCRIPTION: str = "학기별 성적 기록/수정 승인/통계 백엔드 API"
    APP_VERSION: str = "1.0.0"

    # =========================
    # CORS
    # =========================
    # 콤마(,)로 구분된 문자열 → List[str] 로 파싱
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            # "a,b , c" → ["a","b","c"]
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    # =========================
    # 저장소
    # =========================
    # memory: 프로세스 내 컬렉션 / sql: SQLAlchemy records 테이블
    STORAGE_BACKEND: Literal["memory", "sql"] = "memory"
    DATABASE_URL: str = "sqlite:///./grades.db"

    # =========================
    # 성적 정책
    # =========================
    EDIT_AUTHORIZATION_DAYS: int = 30
    DELETE_AUTHORIZATION_DAYS: int = 7
    MINIMUM_ASSESSMENTS_PER_PERIOD: int = 3
    MINIMUM_PASSING_GRADE: float = 6.0
    DEFAULT_WEIGHT: float = 1.0

    # =========================
    # 승인 코드
    # =========================
    AUTHORIZATION_CODE_LENGTH: int = 8
    # false 면 요청자 역할과 무관하게 발급 (역할 확인은 인증 연동 전까지 임시)
    AUTHORIZATION_CODE_COORDINATOR_ONLY: bool = True

    # =========================
    # 요청자 식별 (인증 연동 전 임시값)
    # =========================
    DEFAULT_USER_ID: int = 1
    DEFAULT_USER_NAME: str = "System User"
    DEFAULT_USER_ROLE: Literal["coordinator", "teacher"] = "coordinator"

    # =========================
    # Logging
    # =========================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # =========================
    # BaseSettings Config
    # =========================
    model_config = SettingsConfigDict(
        env_file=".env",               # .env에서 값 로드
        env_file_encoding="utf-8",
        case_sensitive=False,          # 환경변수 대소문자 비구분
        extra="ignore",                # 정의되지 않은 키는 무시
    )


# ✅ settings 객체를 통해 어디서든 접근 가능
settings = Settings()

from dataclasses import dataclass

from config.settings import settings


@dataclass(frozen=True)
class GradePolicy:
    """성적 수정/삭제 승인 기준과 평균 산출 규칙 값"""
    edit_authorization_days: int = 30
    delete_authorization_days: int = 7
    minimum_assessments: int = 3
    minimum_passing_grade: float = 6.0
    default_weight: float = 1.0
    code_length: int = 8
    coordinator_only_codes: bool = True

    @classmethod
    def from_settings(cls) -> "GradePolicy":
        return cls(
            edit_authorization_days=settings.EDIT_AUTHORIZATION_DAYS,
            delete_authorization_days=settings.DELETE_AUTHORIZATION_DAYS,
            minimum_assessments=settings.MINIMUM_ASSESSMENTS_PER_PERIOD,
            minimum_passing_grade=settings.MINIMUM_PASSING_GRADE,
            default_weight=settings.DEFAULT_WEIGHT,
            code_length=settings.AUTHORIZATION_CODE_LENGTH,
            coordinator_only_codes=settings.AUTHORIZATION_CODE_COORDINATOR_ONLY,
        )

from enum import Enum

from pydantic import PositiveInt

from schemas.common import CamelModel, UtcDatetime
from schemas.grades import Justification


# ✅ 승인 코드가 허용하는 작업 (코드는 발급된 작업 유형에만 유효)
class AuthorizationOperation(str, Enum):
    EDIT_GRADE = "Edição de Nota"
    DELETE_GRADE = "Exclusão de Nota"


# ✅ 유효 기간
class ValidityPeriod(str, Enum):
    H6 = "6 horas"
    H12 = "12 horas"
    H24 = "24 horas"

    @property
    def hours(self) -> int:
        return {"6 horas": 6, "12 horas": 12, "24 horas": 24}[self.value]


class AuthorizationCode(CamelModel):
    id: int
    code: str                                 # 8자리 영문 대문자/숫자
    teacher_id: int                           # 코드를 받을 교사 ID
    operation_type: AuthorizationOperation
    justification: str
    expires_at: UtcDatetime
    used: bool = False                        # False → True 한 번만 바뀜
    date_created: UtcDatetime


class AuthorizationCodeGenerate(CamelModel):
    teacher_id: PositiveInt
    operation_type: AuthorizationOperation
    justification: Justification
    validity: ValidityPeriod = ValidityPeriod.H24


class AuthorizationCodeIssued(CamelModel):
    code: str
    expires_at: UtcDatetime
    teacher_id: int
    operation_type: AuthorizationOperation

from pydantic import Field, PositiveInt
from typing import Optional

from schemas.common import CamelModel, UtcDatetime


# ✅ 입력용 (POST)
class StudentCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)        # 학생 이름
    registration_number: str = Field(min_length=1)          # 학번
    class_id: PositiveInt                                   # 소속 반 ID
    class_name: str                                         # 반 이름
    active: bool = True                                     # 재학 여부


# ✅ 저장 레코드
class Student(StudentCreate):
    id: int
    date_created: UtcDatetime
    date_modified: UtcDatetime


class StudentListFilters(CamelModel):
    search: Optional[str] = None
    class_id: Optional[PositiveInt] = None


# ✅ 목록 출력용
class StudentListItem(CamelModel):
    id: int
    name: str
    registration_number: str
    class_name: str
    active: bool

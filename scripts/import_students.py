import csv
import sys

from dependencies.services import ServiceContainer
from utils.context import Actor
from utils.errors import ValidationError

CSV_PATH = "data/students.csv"  # ✅ 파일 경로 (name, registration_number, class_id, class_name, active)


def _is_active(value) -> bool:
    return str(value or "1").strip().lower() not in ("0", "false", "n", "no")


def migrate_students(path: str = CSV_PATH, container: ServiceContainer = None) -> int:
    # sql 저장소 설정(STORAGE_BACKEND=sql)에서 실행해야 데이터가 남음
    container = container or ServiceContainer.build()
    actor = Actor(user_id=0, user_name="CSV Import", role="coordinator")

    count = 0
    with open(path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for line, row in enumerate(reader, start=2):
            try:
                container.students.create(actor, {
                    "name": row["name"],                                  # 학생 이름
                    "registration_number": row["registration_number"],    # 학번
                    "class_id": int(row["class_id"]),                     # 소속 반 ID
                    "class_name": row["class_name"],                      # 반 이름
                    "active": _is_active(row.get("active")),              # 재학 여부
                })
                count += 1
            except (ValueError, ValidationError) as e:
                print(f"⚠️ {line}행 건너뜀: {e}")

    print(f"✅ 학생 명단 CSV → 저장소 등록 완료 ({count}명)")
    return count


if __name__ == "__main__":
    migrate_students(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)

from typing import Optional, Annotated
from fastapi import Header
from config.settings import settings
from utils.context import Actor
from utils.errors import UnauthorizedError

UserIdHeader = Annotated[Optional[str], Header(alias="X-User-Id")]
UserNameHeader = Annotated[Optional[str], Header(alias="X-User-Name")]
UserRoleHeader = Annotated[Optional[str], Header(alias="X-User-Role")]


def get_current_actor(
    user_id: UserIdHeader = None,
    user_name: UserNameHeader = None,
    user_role: UserRoleHeader = None,
) -> Actor:
    # 인증 서버 연동 전: 헤더가 없으면 설정의 기본 사용자로 처리
    if user_id is None:
        return Actor(
            user_id=settings.DEFAULT_USER_ID,
            user_name=user_name or settings.DEFAULT_USER_NAME,
            role=user_role or settings.DEFAULT_USER_ROLE,
        )

    try:
        parsed_id = int(user_id)
    except ValueError:
        raise UnauthorizedError("Invalid X-User-Id header")
    if parsed_id <= 0:
        raise UnauthorizedError("Invalid X-User-Id header")

    return Actor(
        user_id=parsed_id,
        user_name=user_name or f"User {parsed_id}",
        role=(user_role or "teacher").lower(),
    )

from fastapi import APIRouter, Depends

from dependencies.security import get_current_actor
from dependencies.services import ServiceContainer, get_container
from schemas.authorization_codes import AuthorizationCodeGenerate
from schemas.common import ok
from utils.context import Actor

router = APIRouter(prefix="/authorization-codes", tags=["authorization-codes"])


# ✅ [CREATE] 승인 코드 발급 (코디네이터 전용)
@router.post("/", status_code=201)
def generate_authorization_code(
    request: AuthorizationCodeGenerate,
    actor: Actor = Depends(get_current_actor),
    services: ServiceContainer = Depends(get_container),
):
    return ok(services.codes.generate(actor, request))

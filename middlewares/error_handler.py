import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from utils.errors import ServiceError

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str, details=None):
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    # details 가 없으면 키 자체를 생략
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def add_error_handlers(app: FastAPI):
    # ✅ 서비스 계층의 예상된 오류 → 공통 에러 포맷
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return _error(exc.status_code, exc.code, exc.message, exc.details)

    # ✅ 요청 본문/쿼리 검증 실패 → 400 VALIDATION_ERROR
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
        return _error(400, "VALIDATION_ERROR", "Validation failed", details)

    # ✅ 그 외 예외는 로그 남기고 500
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "INTERNAL_ERROR", str(exc))

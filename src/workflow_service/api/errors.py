"""
引擎错误到 HTTP 响应的映射
"""
import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import EngineError, ErrorKind
from ..core.result import EngineResult, T


logger = logging.getLogger(__name__)


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_TRANSITION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class EngineErrorResponse(Exception):
    """携带 EngineError 的路由层异常，由 app 级处理器转换为响应"""
    def __init__(self, error: EngineError):
        self.error = error
        super().__init__(error.message)


def unwrap_or_raise(result: EngineResult[T]) -> T:
    """成功时返回值，失败时抛出 EngineErrorResponse"""
    if not result.ok:
        raise EngineErrorResponse(result.error)
    return result.value


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


async def engine_error_handler(request: Request, exc: EngineErrorResponse) -> JSONResponse:
    """按错误类型映射状态码"""
    error = exc.error
    if error.kind == ErrorKind.INTERNAL:
        # 一致性错误只返回通用信息，细节写日志
        logger.error(
            f"Internal consistency error on {request.method} {request.url.path}: "
            f"{error.message} {error.details}"
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "request_id": _request_id(request)
            }
        )

    return JSONResponse(
        status_code=STATUS_BY_KIND[error.kind],
        content={
            "error": error.kind.value,
            "message": error.message,
            "details": jsonable_encoder(error.details) or None,
            "request_id": _request_id(request)
        }
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求体格式错误统一作为校验错误"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": ErrorKind.VALIDATION.value,
            "message": "Malformed request payload",
            "details": {"errors": jsonable_encoder(exc.errors())},
            "request_id": _request_id(request)
        }
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """全局异常处理器"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
            "request_id": _request_id(request)
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    """注册异常处理器"""
    app.add_exception_handler(EngineErrorResponse, engine_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, global_exception_handler)

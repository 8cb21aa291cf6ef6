"""
工作流服务错误定义

引擎操作不抛出业务异常，而是返回带 ErrorKind 标签的 EngineError，
调用方按 kind 分支处理。WorkflowServiceError 仅用于需要异常语义的场景
（如 CLI 中的 EngineResult.unwrap()）。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any


class ErrorKind(Enum):
    """错误类型"""
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    INTERNAL = "internal_error"


@dataclass(frozen=True)
class EngineError:
    """引擎错误值"""
    kind: ErrorKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def validation(cls, message: str, **details: Any) -> "EngineError":
        return cls(ErrorKind.VALIDATION, message, details)

    @classmethod
    def not_found(cls, message: str, **details: Any) -> "EngineError":
        return cls(ErrorKind.NOT_FOUND, message, details)

    @classmethod
    def invalid_transition(cls, message: str, **details: Any) -> "EngineError":
        return cls(ErrorKind.INVALID_TRANSITION, message, details)

    @classmethod
    def internal(cls, message: str, **details: Any) -> "EngineError":
        return cls(ErrorKind.INTERNAL, message, details)


class WorkflowServiceError(Exception):
    """工作流服务基础异常"""
    def __init__(self, error: EngineError):
        self.error = error
        super().__init__(error.message)

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


class DefinitionParseError(Exception):
    """工作流定义解析异常"""
    pass

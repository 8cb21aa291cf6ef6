"""
引擎操作结果
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from ..exceptions import EngineError, ErrorKind, WorkflowServiceError


T = TypeVar("T")


@dataclass(frozen=True)
class EngineResult(Generic[T]):
    """成功值或 EngineError，二者恰有其一"""
    value: Optional[T] = None
    error: Optional[EngineError] = None

    @classmethod
    def success(cls, value: T) -> "EngineResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: EngineError) -> "EngineResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    def unwrap(self) -> T:
        """返回成功值，失败时抛出 WorkflowServiceError"""
        if self.error is not None:
            raise WorkflowServiceError(self.error)
        return self.value

"""
Workflow Service - 有限状态工作流引擎
"""

__version__ = "1.0.0"

from .core.engine import WorkflowEngine
from .core.parser import DefinitionParser
from .core.result import EngineResult
from .exceptions import ErrorKind, EngineError, WorkflowServiceError
from .models.workflow import State, Action, WorkflowDefinition
from .models.instance import HistoryEntry, WorkflowInstance
from .storage.repository import WorkflowStore, InMemoryWorkflowStore

__all__ = [
    "WorkflowEngine",
    "DefinitionParser",
    "EngineResult",
    "ErrorKind",
    "EngineError",
    "WorkflowServiceError",
    "State",
    "Action",
    "WorkflowDefinition",
    "HistoryEntry",
    "WorkflowInstance",
    "WorkflowStore",
    "InMemoryWorkflowStore"
]

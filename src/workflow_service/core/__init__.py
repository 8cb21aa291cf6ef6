"""Core workflow engine components"""

from .engine import WorkflowEngine
from .parser import DefinitionParser
from .result import EngineResult
from .state_machine import (
    InstanceLockRegistry, TransitionResolver, Transition, AvailableActions
)
from .validator import DefinitionValidator

__all__ = [
    "WorkflowEngine",
    "DefinitionParser",
    "EngineResult",
    "InstanceLockRegistry",
    "TransitionResolver",
    "Transition",
    "AvailableActions",
    "DefinitionValidator"
]

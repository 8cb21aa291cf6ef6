"""Workflow definition and instance models"""

from .workflow import State, Action, WorkflowDefinition
from .instance import (
    HistoryEntry, InstanceHeader, InstanceState, WorkflowInstance
)

__all__ = [
    "State",
    "Action",
    "WorkflowDefinition",
    "HistoryEntry",
    "InstanceHeader",
    "InstanceState",
    "WorkflowInstance"
]

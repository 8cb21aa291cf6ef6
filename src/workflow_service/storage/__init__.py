"""Storage interfaces"""

from .repository import WorkflowStore, InMemoryWorkflowStore

__all__ = [
    "WorkflowStore",
    "InMemoryWorkflowStore"
]

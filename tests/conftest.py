"""
Pytest 配置和公共 fixtures
"""
import pytest
from fastapi.testclient import TestClient

from workflow_service.api.app import create_app
from workflow_service.config import Settings
from workflow_service.core.engine import WorkflowEngine
from workflow_service.models.workflow import WorkflowDefinition, State, Action
from workflow_service.storage.repository import InMemoryWorkflowStore


@pytest.fixture
def grant_payload() -> dict:
    """示例审批工作流（HTTP 载荷格式）"""
    return {
        "id": "grant",
        "name": "Grant",
        "states": [
            {"id": "draft", "name": "Draft", "isInitial": True},
            {"id": "approved", "name": "Approved", "isFinal": True},
            {"id": "rejected", "name": "Rejected", "isFinal": True}
        ],
        "actions": [
            {"id": "approve", "name": "Approve", "fromStates": ["draft"], "toState": "approved"},
            {"id": "reject", "name": "Reject", "fromStates": ["draft"], "toState": "rejected"}
        ]
    }


@pytest.fixture
def grant_definition() -> WorkflowDefinition:
    """示例审批工作流"""
    return WorkflowDefinition(
        id="grant",
        name="Grant",
        states=[
            State(id="draft", name="Draft", is_initial=True),
            State(id="approved", name="Approved", is_final=True),
            State(id="rejected", name="Rejected", is_final=True)
        ],
        actions=[
            Action(id="approve", name="Approve", from_states=["draft"], to_state="approved"),
            Action(id="reject", name="Reject", from_states=["draft"], to_state="rejected")
        ]
    )


@pytest.fixture
def review_definition() -> WorkflowDefinition:
    """带循环的评审工作流"""
    return WorkflowDefinition(
        id="review",
        name="Review",
        states=[
            State(id="open", is_initial=True),
            State(id="in_review"),
            State(id="closed", is_final=True)
        ],
        actions=[
            Action(id="request_review", from_states=["open"], to_state="in_review"),
            Action(id="request_changes", from_states=["in_review"], to_state="open"),
            Action(id="comment", from_states=["open", "in_review"], to_state="in_review"),
            Action(id="close", from_states=["open", "in_review"], to_state="closed")
        ]
    )


@pytest.fixture
def store() -> InMemoryWorkflowStore:
    """创建内存存储"""
    return InMemoryWorkflowStore()


@pytest.fixture
def engine(store) -> WorkflowEngine:
    """创建使用内存存储的工作流引擎"""
    return WorkflowEngine(store=store)


@pytest.fixture
def api_client(engine):
    """创建 API 测试客户端"""
    app = create_app(engine=engine, settings=Settings())

    with TestClient(app) as client:
        yield client

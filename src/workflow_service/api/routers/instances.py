"""
工作流实例 API 路由
"""
from fastapi import APIRouter, Depends

from ..models import (
    ExecuteActionRequest, WorkflowInstanceResponse,
    AvailableActionsResponse, ActionModel, ErrorResponse
)
from ..dependencies import get_workflow_engine
from ..errors import unwrap_or_raise
from ...core.engine import WorkflowEngine


router = APIRouter()


@router.get(
    "/{instance_id}",
    response_model=WorkflowInstanceResponse,
    responses={404: {"model": ErrorResponse}}
)
async def get_instance(
    instance_id: str,
    engine: WorkflowEngine = Depends(get_workflow_engine)
) -> WorkflowInstanceResponse:
    """获取工作流实例"""
    instance = unwrap_or_raise(await engine.get_instance(instance_id))
    return WorkflowInstanceResponse.from_domain(instance)


@router.get(
    "/{instance_id}/available-actions",
    response_model=AvailableActionsResponse,
    responses={404: {"model": ErrorResponse}}
)
async def get_available_actions(
    instance_id: str,
    engine: WorkflowEngine = Depends(get_workflow_engine)
) -> AvailableActionsResponse:
    """获取当前状态下可执行的动作"""
    available = unwrap_or_raise(await engine.available_actions(instance_id))
    return AvailableActionsResponse(
        instance_id=available.instance.id,
        current_state_id=available.instance.current_state_id,
        actions=[ActionModel.from_domain(a) for a in available.actions]
    )


@router.post(
    "/{instance_id}/execute",
    response_model=WorkflowInstanceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
async def execute_action(
    instance_id: str,
    request: ExecuteActionRequest,
    engine: WorkflowEngine = Depends(get_workflow_engine)
) -> WorkflowInstanceResponse:
    """在实例上执行动作"""
    instance = unwrap_or_raise(
        await engine.execute_action(instance_id, request.action_id)
    )
    return WorkflowInstanceResponse.from_domain(instance)

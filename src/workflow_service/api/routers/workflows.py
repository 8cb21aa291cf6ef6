"""
工作流定义 API 路由
"""
from fastapi import APIRouter, Depends, Response, status

from ..models import (
    WorkflowDefinitionRequest, WorkflowDefinitionResponse,
    WorkflowInstanceResponse, ErrorResponse
)
from ..dependencies import get_workflow_engine
from ..errors import unwrap_or_raise
from ...core.engine import WorkflowEngine


router = APIRouter()


@router.post(
    "",
    response_model=WorkflowDefinitionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}}
)
async def create_workflow(
    request: WorkflowDefinitionRequest,
    response: Response,
    engine: WorkflowEngine = Depends(get_workflow_engine)
) -> WorkflowDefinitionResponse:
    """创建并校验工作流定义"""
    definition = unwrap_or_raise(
        await engine.create_and_validate_definition(request.to_domain())
    )
    response.headers["Location"] = f"/workflows/{definition.id}"
    return WorkflowDefinitionResponse.from_domain(definition)


@router.get(
    "/{definition_id}",
    response_model=WorkflowDefinitionResponse,
    responses={404: {"model": ErrorResponse}}
)
async def get_workflow(
    definition_id: str,
    engine: WorkflowEngine = Depends(get_workflow_engine)
) -> WorkflowDefinitionResponse:
    """获取工作流定义"""
    definition = unwrap_or_raise(await engine.get_definition(definition_id))
    return WorkflowDefinitionResponse.from_domain(definition)


@router.post(
    "/{definition_id}/instances",
    response_model=WorkflowInstanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}}
)
async def start_instance(
    definition_id: str,
    response: Response,
    engine: WorkflowEngine = Depends(get_workflow_engine)
) -> WorkflowInstanceResponse:
    """启动工作流实例"""
    instance = unwrap_or_raise(await engine.start_instance(definition_id))
    response.headers["Location"] = f"/instances/{instance.id}"
    return WorkflowInstanceResponse.from_domain(instance)

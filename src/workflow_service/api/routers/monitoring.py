"""
监控 API 路由
"""
from fastapi import APIRouter, Depends
import logging

from ..models import HealthCheckResponse
from ..dependencies import get_workflow_engine
from ...core.engine import WorkflowEngine
from ... import __version__


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    engine: WorkflowEngine = Depends(get_workflow_engine)
) -> HealthCheckResponse:
    """健康检查"""
    checks = {}

    # 检查存储是否可读
    try:
        await engine.store.get_definition("__health__")
        checks["store"] = True
    except Exception as e:
        logger.error(f"Store health check failed: {e}")
        checks["store"] = False

    all_healthy = all(checks.values())

    return HealthCheckResponse(
        status="healthy" if all_healthy else "unhealthy",
        version=__version__,
        checks=checks
    )

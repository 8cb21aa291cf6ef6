"""
FastAPI 依赖注入
"""
from fastapi import HTTPException, Request, status

from ..core.engine import WorkflowEngine


def get_workflow_engine(request: Request) -> WorkflowEngine:
    """获取应用上挂载的工作流引擎"""
    engine = getattr(request.app.state, "engine", None)

    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "service_unavailable",
                "message": "Workflow engine not initialized"
            }
        )

    return engine

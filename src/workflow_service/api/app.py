"""
FastAPI 应用
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from contextlib import asynccontextmanager
import logging

from .routers import workflows, instances, monitoring
from .middleware import RequestLoggingMiddleware
from .errors import register_exception_handlers
from ..config import Settings
from ..core.engine import WorkflowEngine
from ..storage.repository import InMemoryWorkflowStore
from .. import __version__


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("Starting Workflow Service API...")
    yield
    logger.info("Workflow Service API shut down")


def create_app(engine: WorkflowEngine = None, settings: Settings = None) -> FastAPI:
    """
    创建 FastAPI 应用

    Args:
        engine: 工作流引擎；未提供时使用新建的内存存储构造
        settings: 服务配置；未提供时从环境变量加载

    Returns:
        FastAPI: 挂载了引擎的应用
    """
    settings = settings or Settings.from_env()
    if engine is None:
        engine = WorkflowEngine(store=InMemoryWorkflowStore())

    app = FastAPI(
        title="Workflow Service API",
        description="有限状态工作流定义与执行 RESTful API",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )
    app.state.engine = engine
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(workflows.router, prefix="/workflows", tags=["workflows"])
    app.include_router(instances.router, prefix="/instances", tags=["instances"])
    app.include_router(monitoring.router, tags=["monitoring"])

    @app.get("/", include_in_schema=False)
    async def root():
        """API根路径"""
        return RedirectResponse(url="/docs")

    return app

"""
Workflow Service API 主入口
"""
import uvicorn

from workflow_service.config import Settings, configure_logging


if __name__ == "__main__":
    # 获取配置（自动加载 .env）
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    if settings.reload:
        # 开发模式
        uvicorn.run(
            "workflow_service.api.app:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            reload=True,
            log_level=settings.log_level.lower()
        )
    else:
        # 生产模式
        uvicorn.run(
            "workflow_service.api.app:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            workers=settings.workers,
            log_level=settings.log_level.lower()
        )

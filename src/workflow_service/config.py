"""
服务配置（环境变量）
"""
import os
import logging
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    """服务配置"""
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    workers: int = 1
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:5001"])

    def __post_init__(self):
        # 存储在进程内存中，多个 worker 进程各自持有一份，彼此不可见
        if self.workers != 1:
            logger.warning(
                f"workers={self.workers} is not supported with the in-memory store; "
                f"running a single worker"
            )
            self.workers = 1

    @classmethod
    def from_env(cls) -> "Settings":
        """从环境变量（及 .env 文件）加载配置"""
        load_dotenv()

        origins = os.getenv("CORS_ORIGINS", "http://localhost:5001")
        return cls(
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("API_PORT", "8000")),
            reload=_env_bool("API_RELOAD", "false"),
            workers=int(os.getenv("API_WORKERS", "1")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()]
        )


def configure_logging(level: str = "INFO") -> None:
    """配置日志"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )

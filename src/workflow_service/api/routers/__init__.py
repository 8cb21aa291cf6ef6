"""
API 路由器
"""

from . import workflows, instances, monitoring

__all__ = ["workflows", "instances", "monitoring"]

"""
存储接口定义
"""
import threading
from abc import ABC, abstractmethod
from typing import Optional, Dict

from ..models.workflow import WorkflowDefinition
from ..models.instance import WorkflowInstance


class WorkflowStore(ABC):
    """
    工作流存储接口

    只负责按ID存取，不做任何校验；校验由引擎负责。
    每个操作都是独立的原子单元，不存在跨键事务。
    """

    @abstractmethod
    async def add_definition(self, definition: WorkflowDefinition) -> None:
        """保存工作流定义（按ID覆盖）"""
        pass

    @abstractmethod
    async def get_definition(self, definition_id: str) -> Optional[WorkflowDefinition]:
        """获取工作流定义，不存在时返回 None"""
        pass

    @abstractmethod
    async def add_instance(self, instance: WorkflowInstance) -> None:
        """保存工作流实例（按ID覆盖）"""
        pass

    @abstractmethod
    async def get_instance(self, instance_id: str) -> Optional[WorkflowInstance]:
        """获取工作流实例，不存在时返回 None"""
        pass


class InMemoryWorkflowStore(WorkflowStore):
    """内存存储实现（进程生命周期内有效）"""

    def __init__(self):
        self.definitions: Dict[str, WorkflowDefinition] = {}
        self.instances: Dict[str, WorkflowInstance] = {}
        # 两张表分别加锁，互不阻塞
        self._definitions_lock = threading.Lock()
        self._instances_lock = threading.Lock()

    async def add_definition(self, definition: WorkflowDefinition) -> None:
        with self._definitions_lock:
            self.definitions[definition.id] = definition

    async def get_definition(self, definition_id: str) -> Optional[WorkflowDefinition]:
        with self._definitions_lock:
            return self.definitions.get(definition_id)

    async def add_instance(self, instance: WorkflowInstance) -> None:
        with self._instances_lock:
            self.instances[instance.id] = instance

    async def get_instance(self, instance_id: str) -> Optional[WorkflowInstance]:
        with self._instances_lock:
            return self.instances.get(instance_id)

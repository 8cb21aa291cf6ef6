"""
实例状态机: 转换规则与实例锁
"""
import asyncio
import threading
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional, Tuple

from ..models.workflow import WorkflowDefinition, State, Action
from ..models.instance import WorkflowInstance
from ..exceptions import EngineError


class _LockEntry:
    """实例锁及其当前使用者计数（持有者 + 等待者）"""

    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class InstanceLockRegistry:
    """
    每个实例一把互斥锁

    同一实例上的 读取 -> 校验 -> 修改 -> 写回 必须串行执行，
    不同实例之间互不阻塞。

    调用方可能位于不同线程、各自运行自己的事件循环，因此实例锁使用
    threading.Lock，并以非阻塞方式轮询获取，等待期间让出事件循环。
    锁表本身由一把全局 threading.Lock 保护；没有持有者和等待者的
    条目立即移除，锁表大小只取决于正在进行的调用。
    """

    def __init__(self, poll_interval: float = 0.001):
        self.poll_interval = poll_interval
        self._guard = threading.Lock()
        self._entries: Dict[str, _LockEntry] = {}

    def _checkout(self, instance_id: str) -> _LockEntry:
        with self._guard:
            entry = self._entries.get(instance_id)
            if entry is None:
                entry = _LockEntry()
                self._entries[instance_id] = entry
            entry.users += 1
            return entry

    def _checkin(self, instance_id: str, entry: _LockEntry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[instance_id]

    def is_locked(self, instance_id: str) -> bool:
        """实例锁当前是否被持有"""
        with self._guard:
            entry = self._entries.get(instance_id)
            return entry is not None and entry.lock.locked()

    @asynccontextmanager
    async def hold(self, instance_id: str) -> AsyncIterator[None]:
        """在实例锁内执行，任何退出路径（包括取消）都会释放"""
        entry = self._checkout(instance_id)
        try:
            while not entry.lock.acquire(blocking=False):
                await asyncio.sleep(self.poll_interval)
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._checkin(instance_id, entry)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


@dataclass(frozen=True)
class Transition:
    """一次已通过校验的转换"""
    action: Action
    to_state_id: str


@dataclass(frozen=True)
class AvailableActions:
    """同一次读取得到的实例快照及其当前可执行动作"""
    instance: WorkflowInstance
    actions: Tuple[Action, ...] = ()


class TransitionResolver:
    """根据定义与当前状态解析动作是否可执行"""

    def resolve(
        self,
        definition: WorkflowDefinition,
        current_state: State,
        action_id: str
    ) -> Tuple[Optional[Transition], Optional[EngineError]]:
        """返回 (转换, None) 或 (None, 错误)"""
        action = definition.get_action(action_id)
        if action is None:
            return None, EngineError.invalid_transition(
                "Action not found in workflow definition.",
                definition_id=definition.id,
                action_id=action_id
            )

        # 终态没有出边，与动作表无关
        if current_state.is_final:
            return None, EngineError.invalid_transition(
                "Cannot execute action on an instance in a final state.",
                action_id=action_id,
                state_id=current_state.id
            )

        if not action.is_enabled_from(current_state.id):
            return None, EngineError.invalid_transition(
                f"Action '{action_id}' cannot be executed from state '{current_state.id}'.",
                action_id=action_id,
                state_id=current_state.id
            )

        return Transition(action=action, to_state_id=action.to_state), None

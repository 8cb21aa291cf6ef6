"""
工作流实例模型

实例被拆分为两部分:
- InstanceHeader: 不可变的身份与定义引用
- InstanceState: 当前状态与历史记录，只能通过 advance() 产生新值，
  由引擎在实例锁内写回存储
"""
from dataclasses import dataclass, field, replace
from typing import Tuple
from datetime import datetime, timezone
from uuid import uuid4


def utcnow() -> datetime:
    """当前 UTC 时间"""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HistoryEntry:
    """一次状态转换的审计记录"""
    action_id: str
    to_state_id: str
    timestamp: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class InstanceHeader:
    """实例身份（创建后不再变化）"""
    definition_id: str
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class InstanceState:
    """实例的可变部分: 当前状态 + 只追加的历史"""
    current_state_id: str
    history: Tuple[HistoryEntry, ...] = ()
    updated_at: datetime = field(default_factory=utcnow)

    def advance(self, action_id: str, to_state_id: str) -> "InstanceState":
        """执行一次转换，返回新的状态单元"""
        now = utcnow()
        # 保证同一实例的历史时间戳单调不减
        if self.history and now < self.history[-1].timestamp:
            now = self.history[-1].timestamp
        entry = HistoryEntry(action_id=action_id, to_state_id=to_state_id, timestamp=now)
        return InstanceState(
            current_state_id=to_state_id,
            history=self.history + (entry,),
            updated_at=now,
        )


@dataclass(frozen=True)
class WorkflowInstance:
    """工作流实例快照"""
    header: InstanceHeader
    state: InstanceState

    @classmethod
    def start(cls, definition_id: str, initial_state_id: str) -> "WorkflowInstance":
        """以初始状态创建新实例"""
        header = InstanceHeader(definition_id=definition_id)
        return cls(
            header=header,
            state=InstanceState(current_state_id=initial_state_id, updated_at=header.created_at),
        )

    @property
    def id(self) -> str:
        return self.header.id

    @property
    def definition_id(self) -> str:
        return self.header.definition_id

    @property
    def current_state_id(self) -> str:
        return self.state.current_state_id

    @property
    def history(self) -> Tuple[HistoryEntry, ...]:
        return self.state.history

    def with_state(self, state: InstanceState) -> "WorkflowInstance":
        """替换状态单元，身份保持不变"""
        return replace(self, state=state)


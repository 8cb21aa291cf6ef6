"""
工作流定义模型
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


def _freeze(items: Optional[Sequence]) -> Optional[tuple]:
    """列表等可变序列转换为元组，None 保持不变"""
    if items is None:
        return None
    return tuple(items)


@dataclass(frozen=True)
class State:
    """工作流状态"""
    id: str
    name: str = ""
    is_initial: bool = False
    is_final: bool = False


@dataclass(frozen=True)
class Action:
    """状态转换动作: 多个源状态 -> 单个目标状态"""
    id: str
    name: str = ""
    from_states: Tuple[str, ...] = ()
    to_state: str = ""

    def __post_init__(self):
        object.__setattr__(self, "from_states", _freeze(self.from_states) or ())

    def is_enabled_from(self, state_id: str) -> bool:
        """该动作是否可以从给定状态执行"""
        return state_id in self.from_states


@dataclass(frozen=True)
class WorkflowDefinition:
    """
    工作流定义

    states / actions 允许为 None，以便引擎在创建时报告缺失字段，
    而不是在构造阶段直接失败。传入的列表在构造时复制为元组，
    定义一经接受，调用方持有的原列表再怎么修改也不会影响它。
    """
    id: str
    name: str = ""
    states: Optional[Tuple[State, ...]] = None
    actions: Optional[Tuple[Action, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "states", _freeze(self.states))
        object.__setattr__(self, "actions", _freeze(self.actions))

    def get_state(self, state_id: str) -> Optional[State]:
        """根据ID获取状态"""
        for state in self.states or ():
            if state.id == state_id:
                return state
        return None

    def get_action(self, action_id: str) -> Optional[Action]:
        """根据ID获取动作"""
        for action in self.actions or ():
            if action.id == action_id:
                return action
        return None

    def initial_states(self) -> List[State]:
        """所有标记为初始的状态（合法定义中恰好一个）"""
        return [state for state in self.states or () if state.is_initial]

    def get_initial_state(self) -> Optional[State]:
        """获取唯一的初始状态，不唯一时返回 None"""
        initial = self.initial_states()
        if len(initial) != 1:
            return None
        return initial[0]

    def actions_from(self, state_id: str) -> List[Action]:
        """从给定状态可执行的动作"""
        return [action for action in self.actions or () if action.is_enabled_from(state_id)]

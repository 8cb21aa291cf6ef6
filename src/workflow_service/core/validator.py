"""
工作流定义校验器
"""
from typing import Optional, Set

from ..models.workflow import WorkflowDefinition
from ..exceptions import EngineError


class DefinitionValidator:
    """
    工作流定义校验器

    规则按固定顺序检查，返回第一个违反的规则:
    1. 定义本身不能为空
    2. states 必须存在且非空
    3. actions 必须存在（允许为空列表）
    4. 恰好一个初始状态
    5. 每个动作的 to_state / from_states 必须引用已存在的状态
    """

    def validate(self, definition: Optional[WorkflowDefinition]) -> Optional[EngineError]:
        """校验定义，合法时返回 None"""
        if definition is None:
            return EngineError.validation("Workflow definition cannot be null.")

        if not definition.states:
            return EngineError.validation(
                "Workflow definition must have at least one state.",
                definition_id=definition.id
            )

        if definition.actions is None:
            return EngineError.validation(
                "Workflow definition must have an actions list (can be empty).",
                definition_id=definition.id
            )

        initial_count = len(definition.initial_states())
        if initial_count != 1:
            return EngineError.validation(
                "Definition must have exactly one initial state.",
                definition_id=definition.id,
                initial_state_count=initial_count
            )

        state_ids: Set[str] = {state.id for state in definition.states}
        for action in definition.actions:
            if action.to_state not in state_ids:
                return EngineError.validation(
                    f"Action '{action.id}' points to a non-existent ToState '{action.to_state}'.",
                    definition_id=definition.id,
                    action_id=action.id,
                    state_id=action.to_state
                )
            for from_state in action.from_states:
                if from_state not in state_ids:
                    return EngineError.validation(
                        f"Action '{action.id}' contains a non-existent FromState '{from_state}'.",
                        definition_id=definition.id,
                        action_id=action.id,
                        state_id=from_state
                    )

        return None

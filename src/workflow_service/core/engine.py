"""
工作流引擎
"""
import logging
from typing import Optional

from ..models.workflow import WorkflowDefinition
from ..models.instance import WorkflowInstance
from ..exceptions import EngineError
from ..storage.repository import WorkflowStore
from .result import EngineResult
from .validator import DefinitionValidator
from .state_machine import InstanceLockRegistry, TransitionResolver, AvailableActions


logger = logging.getLogger(__name__)


class WorkflowEngine:
    """
    工作流引擎

    负责定义校验、实例创建与状态转换。存储由调用方显式构造并传入，
    引擎不持有实例副本，每次调用都通过存储按ID读取。
    """

    def __init__(
        self,
        store: WorkflowStore,
        validator: DefinitionValidator = None,
        resolver: TransitionResolver = None
    ):
        self.store = store
        self.validator = validator or DefinitionValidator()
        self.resolver = resolver or TransitionResolver()
        self.instance_locks = InstanceLockRegistry()

    async def create_and_validate_definition(
        self,
        definition: Optional[WorkflowDefinition]
    ) -> EngineResult[WorkflowDefinition]:
        """校验并保存工作流定义，校验失败时不写入存储"""
        error = self.validator.validate(definition)
        if error:
            logger.warning(f"Rejected workflow definition: {error.message}")
            return EngineResult.failure(error)

        # 同ID定义直接覆盖
        await self.store.add_definition(definition)
        logger.info(
            f"Created workflow definition: {definition.id} "
            f"({len(definition.states)} states, {len(definition.actions)} actions)"
        )
        return EngineResult.success(definition)

    async def get_definition(self, definition_id: str) -> EngineResult[WorkflowDefinition]:
        """获取工作流定义"""
        definition = await self.store.get_definition(definition_id)
        if definition is None:
            return EngineResult.failure(EngineError.not_found(
                "Workflow definition not found.",
                definition_id=definition_id
            ))
        return EngineResult.success(definition)

    async def start_instance(self, definition_id: str) -> EngineResult[WorkflowInstance]:
        """以定义的初始状态启动新实例"""
        definition = await self.store.get_definition(definition_id)
        if definition is None:
            return EngineResult.failure(EngineError.not_found(
                "Workflow definition not found.",
                definition_id=definition_id
            ))

        initial_state = definition.get_initial_state()
        if initial_state is None:
            # 只可能由绕过引擎直接写入存储导致
            logger.error(f"Stored definition {definition_id} has no unique initial state")
            return EngineResult.failure(EngineError.internal(
                "Workflow definition has no unique initial state.",
                definition_id=definition_id
            ))

        instance = WorkflowInstance.start(definition_id, initial_state.id)
        await self.store.add_instance(instance)
        logger.info(
            f"Started workflow instance: {instance.id} "
            f"(definition: {definition_id}, state: {initial_state.id})"
        )
        return EngineResult.success(instance)

    async def get_instance(self, instance_id: str) -> EngineResult[WorkflowInstance]:
        """获取工作流实例"""
        instance = await self.store.get_instance(instance_id)
        if instance is None:
            return EngineResult.failure(EngineError.not_found(
                "Workflow instance not found.",
                instance_id=instance_id
            ))
        return EngineResult.success(instance)

    async def execute_action(
        self,
        instance_id: str,
        action_id: str
    ) -> EngineResult[WorkflowInstance]:
        """在实例上执行动作"""
        async with self.instance_locks.hold(instance_id):
            instance = await self.store.get_instance(instance_id)
            if instance is None:
                return EngineResult.failure(EngineError.not_found(
                    "Workflow instance not found.",
                    instance_id=instance_id
                ))

            definition = await self.store.get_definition(instance.definition_id)
            if definition is None:
                logger.error(
                    f"Instance {instance_id} references missing definition "
                    f"{instance.definition_id}"
                )
                return EngineResult.failure(EngineError.internal(
                    "Instance has an invalid definition reference.",
                    instance_id=instance_id,
                    definition_id=instance.definition_id
                ))

            current_state = definition.get_state(instance.current_state_id)
            if current_state is None:
                logger.error(
                    f"Instance {instance_id} is in state {instance.current_state_id} "
                    f"unknown to definition {definition.id}"
                )
                return EngineResult.failure(EngineError.internal(
                    "Instance current state is not part of its definition.",
                    instance_id=instance_id,
                    state_id=instance.current_state_id
                ))

            transition, error = self.resolver.resolve(definition, current_state, action_id)
            if error:
                logger.warning(
                    f"Rejected action '{action_id}' on instance {instance_id}: {error.message}"
                )
                return EngineResult.failure(error)

            updated = instance.with_state(
                instance.state.advance(action_id, transition.to_state_id)
            )
            await self.store.add_instance(updated)

        logger.info(
            f"Executed action '{action_id}' on instance {instance_id}: "
            f"{current_state.id} -> {transition.to_state_id}"
        )
        return EngineResult.success(updated)

    async def available_actions(self, instance_id: str) -> EngineResult[AvailableActions]:
        """
        当前状态下可执行的动作，终态时为空

        实例只读取一次，返回的快照与动作列表对应同一状态。
        """
        instance = await self.store.get_instance(instance_id)
        if instance is None:
            return EngineResult.failure(EngineError.not_found(
                "Workflow instance not found.",
                instance_id=instance_id
            ))

        definition = await self.store.get_definition(instance.definition_id)
        if definition is None:
            logger.error(
                f"Instance {instance_id} references missing definition "
                f"{instance.definition_id}"
            )
            return EngineResult.failure(EngineError.internal(
                "Instance has an invalid definition reference.",
                instance_id=instance_id,
                definition_id=instance.definition_id
            ))

        current_state = definition.get_state(instance.current_state_id)
        if current_state is None:
            return EngineResult.failure(EngineError.internal(
                "Instance current state is not part of its definition.",
                instance_id=instance_id,
                state_id=instance.current_state_id
            ))
        if current_state.is_final:
            return EngineResult.success(AvailableActions(instance=instance))

        return EngineResult.success(AvailableActions(
            instance=instance,
            actions=tuple(definition.actions_from(current_state.id))
        ))

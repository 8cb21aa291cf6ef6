"""
并发执行测试
"""
import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from workflow_service.core.engine import WorkflowEngine
from workflow_service.core.state_machine import InstanceLockRegistry
from workflow_service.exceptions import ErrorKind
from workflow_service.models.workflow import WorkflowDefinition, State, Action
from workflow_service.storage.repository import InMemoryWorkflowStore


class YieldingStore(InMemoryWorkflowStore):
    """每次存取都让出事件循环，放大交错执行的机会"""

    async def get_definition(self, definition_id):
        await asyncio.sleep(0)
        return await super().get_definition(definition_id)

    async def get_instance(self, instance_id):
        await asyncio.sleep(0)
        return await super().get_instance(instance_id)

    async def add_instance(self, instance):
        await asyncio.sleep(0)
        await super().add_instance(instance)


class SlowStore(InMemoryWorkflowStore):
    """读取实例时等待一小段时间，使跨线程调用在读写之间重叠"""

    async def get_instance(self, instance_id):
        await asyncio.sleep(0.01)
        return await super().get_instance(instance_id)


@pytest.fixture
def one_way_definition() -> WorkflowDefinition:
    """起始状态只有一个可执行动作"""
    return WorkflowDefinition(
        id="one-way",
        states=[State(id="start", is_initial=True), State(id="middle"), State(id="end", is_final=True)],
        actions=[
            Action(id="advance", from_states=["start"], to_state="middle"),
            Action(id="finish", from_states=["middle"], to_state="end")
        ]
    )


class TestConcurrentExecution:
    """并发执行测试类"""

    @pytest.mark.asyncio
    async def test_single_enabled_action_succeeds_once(self, one_way_definition):
        """测试并发执行同一动作只有一次成功"""
        engine = WorkflowEngine(store=YieldingStore())
        await engine.create_and_validate_definition(one_way_definition)
        instance = (await engine.start_instance("one-way")).unwrap()

        results = await asyncio.gather(*[
            engine.execute_action(instance.id, "advance") for _ in range(20)
        ])

        successes = [r for r in results if r.ok]
        failures = [r for r in results if not r.ok]
        assert len(successes) == 1
        assert len(failures) == 19
        assert all(r.kind == ErrorKind.INVALID_TRANSITION for r in failures)

        current = (await engine.get_instance(instance.id)).unwrap()
        assert current.current_state_id == "middle"
        assert len(current.history) == 1

    @pytest.mark.asyncio
    async def test_mixed_actions_keep_history_consistent(self, one_way_definition):
        """测试并发混合动作不丢失更新"""
        engine = WorkflowEngine(store=YieldingStore())
        await engine.create_and_validate_definition(one_way_definition)
        instance = (await engine.start_instance("one-way")).unwrap()

        calls = []
        for _ in range(10):
            calls.append(engine.execute_action(instance.id, "advance"))
            calls.append(engine.execute_action(instance.id, "finish"))
        results = await asyncio.gather(*calls)

        current = (await engine.get_instance(instance.id)).unwrap()
        succeeded = [r.value for r in results if r.ok]
        assert len(current.history) == len(succeeded)
        assert [e.action_id for e in current.history] == ["advance", "finish"]
        assert current.current_state_id == "end"

    @pytest.mark.asyncio
    async def test_independent_instances(self, one_way_definition):
        """测试不同实例互不影响"""
        engine = WorkflowEngine(store=YieldingStore())
        await engine.create_and_validate_definition(one_way_definition)
        instances = [(await engine.start_instance("one-way")).unwrap() for _ in range(5)]

        results = await asyncio.gather(*[
            engine.execute_action(i.id, "advance") for i in instances
        ])

        assert all(r.ok for r in results)
        assert len(engine.instance_locks) == 0

    @pytest.mark.asyncio
    async def test_unknown_instances_leave_no_locks(self):
        """测试不存在的实例不会在锁表中残留条目"""
        engine = WorkflowEngine(store=YieldingStore())

        results = await asyncio.gather(*[
            engine.execute_action(f"missing-{n}", "advance") for n in range(200)
        ])

        assert all(r.kind == ErrorKind.NOT_FOUND for r in results)
        assert len(engine.instance_locks) == 0


class TestThreadedExecution:
    """多线程、多事件循环执行测试类"""

    def test_single_enabled_action_succeeds_once_across_threads(self, one_way_definition):
        """测试每个线程运行独立事件循环时同一动作只有一次成功"""
        engine = WorkflowEngine(store=SlowStore())
        asyncio.run(engine.create_and_validate_definition(one_way_definition))
        instance = asyncio.run(engine.start_instance("one-way")).unwrap()

        def run_in_own_loop(_):
            return asyncio.run(engine.execute_action(instance.id, "advance"))

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(run_in_own_loop, range(8), timeout=30))

        successes = [r for r in results if r.ok]
        failures = [r for r in results if not r.ok]
        assert len(successes) == 1
        assert len(failures) == 7
        assert all(r.kind == ErrorKind.INVALID_TRANSITION for r in failures)

        current = asyncio.run(engine.get_instance(instance.id)).unwrap()
        assert current.current_state_id == "middle"
        assert len(current.history) == 1
        assert len(engine.instance_locks) == 0

    def test_mixed_actions_across_threads(self, one_way_definition):
        """测试跨线程混合动作不丢失更新"""
        engine = WorkflowEngine(store=SlowStore())
        asyncio.run(engine.create_and_validate_definition(one_way_definition))
        instance = asyncio.run(engine.start_instance("one-way")).unwrap()
        action_ids = ["advance", "finish"] * 4

        def run_in_own_loop(action_id):
            return asyncio.run(engine.execute_action(instance.id, action_id))

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(run_in_own_loop, action_ids, timeout=30))

        current = asyncio.run(engine.get_instance(instance.id)).unwrap()
        assert len(current.history) == len([r for r in results if r.ok])
        assert [e.action_id for e in current.history] in (["advance"], ["advance", "finish"])


class TestInstanceLockRegistry:
    """实例锁表测试类"""

    @pytest.mark.asyncio
    async def test_entry_exists_only_while_held(self):
        """测试锁条目只在持有期间存在"""
        locks = InstanceLockRegistry()

        async with locks.hold("i-1"):
            assert locks.is_locked("i-1")
            assert not locks.is_locked("i-2")
            assert len(locks) == 1

        assert not locks.is_locked("i-1")
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_released_when_body_raises(self):
        """测试异常退出时释放锁"""
        locks = InstanceLockRegistry()

        with pytest.raises(RuntimeError):
            async with locks.hold("i-1"):
                raise RuntimeError("boom")

        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_cancelled_waiter_leaves_no_entry(self):
        """测试等待中被取消的调用不残留条目"""
        locks = InstanceLockRegistry()
        entered = asyncio.Event()
        release = asyncio.Event()

        async def holder():
            async with locks.hold("i-1"):
                entered.set()
                await release.wait()

        async def waiter():
            async with locks.hold("i-1"):
                pass

        holding = asyncio.create_task(holder())
        await entered.wait()
        waiting = asyncio.create_task(waiter())
        await asyncio.sleep(0.01)
        waiting.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiting

        release.set()
        await holding
        assert len(locks) == 0

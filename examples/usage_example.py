"""
工作流服务使用示例
"""
import asyncio
from pathlib import Path
import logging

from workflow_service import WorkflowEngine, DefinitionParser, InMemoryWorkflowStore, ErrorKind


# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


async def main():
    """审批流程示例"""
    engine = WorkflowEngine(store=InMemoryWorkflowStore())

    # 加载并注册工作流定义
    definition = DefinitionParser().parse(Path(__file__).parent / "grant.yaml")
    result = await engine.create_and_validate_definition(definition)
    if not result.ok:
        print(f"定义不合法: {result.error.message}")
        return
    print(f"创建工作流: {definition.id}")

    # 启动实例
    instance = (await engine.start_instance(definition.id)).unwrap()
    print(f"启动实例: {instance.id} (状态: {instance.current_state_id})")

    for action_id in ["submit", "revise", "submit", "approve", "reject"]:
        result = await engine.execute_action(instance.id, action_id)
        if result.kind == ErrorKind.INVALID_TRANSITION:
            print(f"动作 {action_id} 被拒绝: {result.error.message}")
            continue
        instance = result.unwrap()
        print(f"执行 {action_id}: -> {instance.current_state_id}")

    print("\n历史记录:")
    for entry in instance.history:
        print(f"  {entry.timestamp.isoformat()} {entry.action_id} -> {entry.to_state_id}")


if __name__ == "__main__":
    asyncio.run(main())

"""
工作流定义解析器
"""
import yaml
import json
from typing import Dict, Any, List, Optional, Union
from pathlib import Path

from ..models.workflow import WorkflowDefinition, State, Action
from ..exceptions import DefinitionParseError


class DefinitionParser:
    """
    工作流定义解析器

    只负责把 dict / YAML / JSON 转换为 WorkflowDefinition，不做规则校验。
    字段同时支持 camelCase（isInitial, fromStates, toState）与 snake_case。
    """

    def __init__(self):
        self.parsers = {
            'yaml': self._parse_yaml,
            'yml': self._parse_yaml,
            'json': self._parse_json
        }

    def parse(self, source: Union[str, Path, Dict[str, Any]]) -> WorkflowDefinition:
        """
        解析工作流定义

        Args:
            source: 定义来源，可以是文件路径、YAML/JSON 字符串或字典

        Returns:
            WorkflowDefinition: 解析后的定义
        """
        if isinstance(source, dict):
            return self.parse_dict(source)

        if isinstance(source, Path):
            return self.parse_file(source)

        if isinstance(source, str):
            path = Path(source)
            if len(source) < 4096 and path.suffix and path.is_file():
                return self.parse_file(path)
            return self.parse_string(source)

        raise DefinitionParseError(f"Unsupported source type: {type(source)}")

    def parse_file(self, file_path: Path) -> WorkflowDefinition:
        """解析定义文件"""
        suffix = file_path.suffix.lower().lstrip('.')
        if suffix not in self.parsers:
            raise DefinitionParseError(f"Unsupported file format: {suffix}")

        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()

        data = self.parsers[suffix](content)
        return self.parse_dict(data)

    def parse_string(self, content: str) -> WorkflowDefinition:
        """解析定义字符串（JSON 是 YAML 的子集，统一按 YAML 解析）"""
        return self.parse_dict(self._parse_yaml(content))

    def _parse_yaml(self, content: str) -> Dict[str, Any]:
        """解析YAML格式"""
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DefinitionParseError(f"Failed to parse YAML: {e}")

    def _parse_json(self, content: str) -> Dict[str, Any]:
        """解析JSON格式"""
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise DefinitionParseError(f"Failed to parse JSON: {e}")

    def parse_dict(self, data: Dict[str, Any]) -> WorkflowDefinition:
        """解析字典格式的工作流定义"""
        if not isinstance(data, dict):
            raise DefinitionParseError("Workflow definition must be a mapping")

        if 'workflow' in data:
            data = data['workflow']
            if not isinstance(data, dict):
                raise DefinitionParseError("'workflow' must be a mapping")

        definition_id = data.get('id')
        if not definition_id:
            raise DefinitionParseError("Workflow definition must have an id")

        states_data = data.get('states')
        actions_data = data.get('actions')

        return WorkflowDefinition(
            id=str(definition_id),
            name=data.get('name', ''),
            states=None if states_data is None else self._parse_states(states_data),
            actions=None if actions_data is None else self._parse_actions(actions_data)
        )

    def _parse_states(self, states_data: Any) -> List[State]:
        """解析状态列表"""
        if not isinstance(states_data, list):
            raise DefinitionParseError("'states' must be a list")

        states = []
        for state_data in states_data:
            if not isinstance(state_data, dict) or 'id' not in state_data:
                raise DefinitionParseError(f"Invalid state: {state_data}")
            states.append(State(
                id=str(state_data['id']),
                name=state_data.get('name', ''),
                is_initial=bool(self._get(state_data, 'isInitial', 'is_initial', False)),
                is_final=bool(self._get(state_data, 'isFinal', 'is_final', False))
            ))
        return states

    def _parse_actions(self, actions_data: Any) -> List[Action]:
        """解析动作列表"""
        if not isinstance(actions_data, list):
            raise DefinitionParseError("'actions' must be a list")

        actions = []
        for action_data in actions_data:
            if not isinstance(action_data, dict) or 'id' not in action_data:
                raise DefinitionParseError(f"Invalid action: {action_data}")

            from_states = self._get(action_data, 'fromStates', 'from_states', [])
            if isinstance(from_states, str):
                from_states = [from_states]
            if not isinstance(from_states, list):
                raise DefinitionParseError(
                    f"Action '{action_data['id']}' fromStates must be a list"
                )

            actions.append(Action(
                id=str(action_data['id']),
                name=action_data.get('name', ''),
                from_states=[str(s) for s in from_states],
                to_state=str(self._get(action_data, 'toState', 'to_state', ''))
            ))
        return actions

    @staticmethod
    def _get(data: Dict[str, Any], camel: str, snake: str, default: Optional[Any] = None) -> Any:
        """按 camelCase 或 snake_case 取值"""
        if camel in data:
            return data[camel]
        return data.get(snake, default)

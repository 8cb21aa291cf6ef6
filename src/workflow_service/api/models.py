"""
API 请求和响应模型
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import datetime

from ..models.workflow import WorkflowDefinition, State, Action
from ..models.instance import WorkflowInstance, HistoryEntry


class ApiModel(BaseModel):
    """camelCase 别名，同时接受字段名"""
    model_config = ConfigDict(populate_by_name=True)


# 工作流定义相关模型

class StateModel(ApiModel):
    """状态"""
    id: str = Field(..., description="状态ID")
    name: str = Field("", description="状态名称")
    is_initial: bool = Field(False, alias="isInitial", description="是否初始状态")
    is_final: bool = Field(False, alias="isFinal", description="是否终态")

    def to_domain(self) -> State:
        return State(
            id=self.id,
            name=self.name,
            is_initial=self.is_initial,
            is_final=self.is_final
        )

    @classmethod
    def from_domain(cls, state: State) -> "StateModel":
        return cls(
            id=state.id,
            name=state.name,
            is_initial=state.is_initial,
            is_final=state.is_final
        )


class ActionModel(ApiModel):
    """动作"""
    id: str = Field(..., description="动作ID")
    name: str = Field("", description="动作名称")
    from_states: List[str] = Field(default_factory=list, alias="fromStates", description="源状态ID列表")
    to_state: str = Field("", alias="toState", description="目标状态ID")

    def to_domain(self) -> Action:
        return Action(
            id=self.id,
            name=self.name,
            from_states=tuple(self.from_states),
            to_state=self.to_state
        )

    @classmethod
    def from_domain(cls, action: Action) -> "ActionModel":
        return cls(
            id=action.id,
            name=action.name,
            from_states=list(action.from_states),
            to_state=action.to_state
        )


class WorkflowDefinitionRequest(ApiModel):
    """创建工作流定义请求"""
    id: str = Field(..., description="工作流ID")
    name: str = Field("", description="工作流名称")
    # 缺失时交由引擎报告校验错误
    states: Optional[List[StateModel]] = Field(None, description="状态列表")
    actions: Optional[List[ActionModel]] = Field(None, description="动作列表")

    def to_domain(self) -> WorkflowDefinition:
        return WorkflowDefinition(
            id=self.id,
            name=self.name,
            states=None if self.states is None else [s.to_domain() for s in self.states],
            actions=None if self.actions is None else [a.to_domain() for a in self.actions]
        )


class WorkflowDefinitionResponse(ApiModel):
    """工作流定义响应"""
    id: str = Field(..., description="工作流ID")
    name: str = Field(..., description="工作流名称")
    states: List[StateModel] = Field(..., description="状态列表")
    actions: List[ActionModel] = Field(..., description="动作列表")

    @classmethod
    def from_domain(cls, definition: WorkflowDefinition) -> "WorkflowDefinitionResponse":
        return cls(
            id=definition.id,
            name=definition.name,
            states=[StateModel.from_domain(s) for s in definition.states or []],
            actions=[ActionModel.from_domain(a) for a in definition.actions or []]
        )


# 实例相关模型

class ExecuteActionRequest(ApiModel):
    """执行动作请求"""
    action_id: str = Field(..., alias="actionId", description="动作ID")


class HistoryEntryModel(ApiModel):
    """历史记录"""
    action_id: str = Field(..., alias="actionId", description="动作ID")
    to_state_id: str = Field(..., alias="toStateId", description="转换后的状态ID")
    timestamp: datetime = Field(..., description="执行时间")

    @classmethod
    def from_domain(cls, entry: HistoryEntry) -> "HistoryEntryModel":
        return cls(
            action_id=entry.action_id,
            to_state_id=entry.to_state_id,
            timestamp=entry.timestamp
        )


class WorkflowInstanceResponse(ApiModel):
    """工作流实例响应"""
    id: str = Field(..., description="实例ID")
    definition_id: str = Field(..., alias="definitionId", description="工作流ID")
    current_state_id: str = Field(..., alias="currentStateId", description="当前状态ID")
    history: List[HistoryEntryModel] = Field(default_factory=list, description="历史记录")
    created_at: datetime = Field(..., alias="createdAt", description="创建时间")
    updated_at: datetime = Field(..., alias="updatedAt", description="更新时间")

    @classmethod
    def from_domain(cls, instance: WorkflowInstance) -> "WorkflowInstanceResponse":
        return cls(
            id=instance.id,
            definition_id=instance.definition_id,
            current_state_id=instance.current_state_id,
            history=[HistoryEntryModel.from_domain(e) for e in instance.history],
            created_at=instance.header.created_at,
            updated_at=instance.state.updated_at
        )


class AvailableActionsResponse(ApiModel):
    """可执行动作响应"""
    instance_id: str = Field(..., alias="instanceId", description="实例ID")
    current_state_id: str = Field(..., alias="currentStateId", description="当前状态ID")
    actions: List[ActionModel] = Field(default_factory=list, description="可执行动作")


# 通用模型

class ErrorResponse(BaseModel):
    """错误响应"""
    error: str = Field(..., description="错误类型")
    message: str = Field(..., description="错误信息")
    details: Optional[Dict[str, Any]] = Field(None, description="错误详情")
    request_id: Optional[str] = Field(None, description="请求ID")


class HealthCheckResponse(BaseModel):
    """健康检查响应"""
    status: str = Field(..., description="健康状态", examples=["healthy", "unhealthy"])
    version: str = Field(..., description="版本号")
    checks: Dict[str, bool] = Field(default_factory=dict, description="各组件检查结果")

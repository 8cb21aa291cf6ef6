"""
API 端点测试
"""
import pytest

from workflow_service.models.instance import WorkflowInstance


class TestWorkflowAPI:
    """工作流定义 API 测试类"""

    def test_create_workflow(self, api_client, grant_payload):
        """测试创建工作流"""
        response = api_client.post("/workflows", json=grant_payload)

        assert response.status_code == 201
        assert response.headers["Location"] == "/workflows/grant"
        data = response.json()
        assert data["id"] == "grant"
        assert data["states"][0] == {"id": "draft", "name": "Draft", "isInitial": True, "isFinal": False}
        assert data["actions"][0]["fromStates"] == ["draft"]
        assert data["actions"][0]["toState"] == "approved"

    def test_get_workflow(self, api_client, grant_payload):
        """测试获取工作流"""
        api_client.post("/workflows", json=grant_payload)

        response = api_client.get("/workflows/grant")
        assert response.status_code == 200
        assert response.json()["name"] == "Grant"

    def test_get_missing_workflow(self, api_client):
        """测试获取不存在的工作流"""
        response = api_client.get("/workflows/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_create_invalid_workflow(self, api_client, grant_payload):
        """测试创建不合法的工作流"""
        grant_payload["states"][1]["isInitial"] = True

        response = api_client.post("/workflows", json=grant_payload)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "validation_error"
        assert "exactly one initial state" in data["message"]
        assert api_client.get("/workflows/grant").status_code == 404

    def test_create_workflow_without_states(self, api_client):
        """测试缺失状态列表"""
        response = api_client.post("/workflows", json={"id": "wf", "actions": []})

        assert response.status_code == 400
        assert "at least one state" in response.json()["message"]

    def test_malformed_payload(self, api_client):
        """测试请求体格式错误"""
        response = api_client.post("/workflows", json={"name": "no id"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_snake_case_payload_accepted(self, api_client):
        """测试接受字段名形式的载荷"""
        response = api_client.post("/workflows", json={
            "id": "wf",
            "states": [{"id": "a", "is_initial": True}, {"id": "b"}],
            "actions": [{"id": "go", "from_states": ["a"], "to_state": "b"}]
        })

        assert response.status_code == 201
        assert response.json()["actions"][0]["toState"] == "b"


class TestInstanceAPI:
    """工作流实例 API 测试类"""

    @pytest.fixture
    def instance_id(self, api_client, grant_payload) -> str:
        api_client.post("/workflows", json=grant_payload)
        response = api_client.post("/workflows/grant/instances")
        assert response.status_code == 201
        return response.json()["id"]

    def test_start_instance(self, api_client, grant_payload):
        """测试启动实例"""
        api_client.post("/workflows", json=grant_payload)

        response = api_client.post("/workflows/grant/instances")

        assert response.status_code == 201
        data = response.json()
        assert response.headers["Location"] == f"/instances/{data['id']}"
        assert data["definitionId"] == "grant"
        assert data["currentStateId"] == "draft"
        assert data["history"] == []

    def test_start_instance_missing_workflow(self, api_client):
        """测试定义不存在时启动实例"""
        response = api_client.post("/workflows/missing/instances")

        assert response.status_code == 404

    def test_get_instance(self, api_client, instance_id):
        """测试获取实例"""
        response = api_client.get(f"/instances/{instance_id}")

        assert response.status_code == 200
        assert response.json()["id"] == instance_id
        assert api_client.get("/instances/missing").status_code == 404

    def test_execute_grant_scenario(self, api_client, instance_id):
        """测试审批流程"""
        response = api_client.post(f"/instances/{instance_id}/execute", json={"actionId": "approve"})

        assert response.status_code == 200
        data = response.json()
        assert data["currentStateId"] == "approved"
        assert len(data["history"]) == 1
        assert data["history"][0]["actionId"] == "approve"
        assert data["history"][0]["toStateId"] == "approved"

        response = api_client.post(f"/instances/{instance_id}/execute", json={"actionId": "reject"})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_transition"

        data = api_client.get(f"/instances/{instance_id}").json()
        assert data["currentStateId"] == "approved"
        assert len(data["history"]) == 1

    def test_execute_unknown_action(self, api_client, instance_id):
        """测试执行不存在的动作"""
        response = api_client.post(f"/instances/{instance_id}/execute", json={"actionId": "publish"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_transition"

    def test_execute_on_missing_instance(self, api_client):
        """测试实例不存在"""
        response = api_client.post("/instances/missing/execute", json={"actionId": "approve"})

        assert response.status_code == 404

    def test_execute_requires_action_id(self, api_client, instance_id):
        """测试缺失 actionId"""
        response = api_client.post(f"/instances/{instance_id}/execute", json={})

        assert response.status_code == 400

    def test_available_actions(self, api_client, instance_id):
        """测试可执行动作"""
        response = api_client.get(f"/instances/{instance_id}/available-actions")

        assert response.status_code == 200
        data = response.json()
        assert data["instanceId"] == instance_id
        assert data["currentStateId"] == "draft"
        assert [a["id"] for a in data["actions"]] == ["approve", "reject"]

    def test_internal_error_is_generic(self, api_client, store):
        """测试一致性错误不泄露细节"""
        orphan = WorkflowInstance.start("ghost", "draft")
        store.instances[orphan.id] = orphan

        response = api_client.post(f"/instances/{orphan.id}/execute", json={"actionId": "approve"})

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "internal_server_error"
        assert "ghost" not in response.text


class TestMonitoringAPI:
    """监控 API 测试类"""

    def test_health(self, api_client):
        """测试健康检查"""
        response = api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"] == {"store": True}

    def test_root_redirects_to_docs(self, api_client):
        """测试根路径跳转"""
        response = api_client.get("/", follow_redirects=False)

        assert response.status_code in (302, 307)
        assert response.headers["location"] == "/docs"

    def test_request_id_header(self, api_client):
        """测试请求ID响应头"""
        response = api_client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert "X-Process-Time" in response.headers

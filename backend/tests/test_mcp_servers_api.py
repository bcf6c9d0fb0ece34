"""
mcp_servers.py API 엔드포인트 테스트
- 연결 테스트는 probe_mcp_server를 모킹
"""
import pytest
from unittest.mock import AsyncMock, patch
from fastapi import status

from app.crud import mcp_server as crud_mcp
from app.crud import user_secret as crud_secret
from app.services.mcp_probe import ProbeResult

BASE = "/api/mcp"
PROBE = "app.api.endpoints.mcp_servers.probe_mcp_server"


async def _create(db, user, **overrides):
    data = {"name": "GitHub MCP", "url": "http://localhost:9000"}
    data.update(overrides)
    return await crud_mcp.create_server(db, user.id, data)


class TestMcpServerCrudEndpoints:

    @pytest.mark.asyncio
    async def test_create_with_defaults(self, authenticated_client):
        response = await authenticated_client.post(
            BASE, json={"name": "Files", "url": "http://localhost:9000"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        server = response.json()["data"]["server"]
        assert server["transport"] == "http"
        assert server["authType"] == "none"
        assert server["authSecretId"] is None
        assert server["enabled"] is True
        assert server["status"] == "unknown"
        assert server["lastChecked"] is None

    @pytest.mark.asyncio
    async def test_create_requires_url(self, authenticated_client):
        response = await authenticated_client.post(BASE, json={"name": "Files"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "url" in response.json()["error"]["message"]

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_transport(self, authenticated_client):
        response = await authenticated_client.post(
            BASE, json={"name": "Files", "url": "http://x", "transport": "grpc"}
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_create_accepts_snake_case(self, authenticated_client):
        response = await authenticated_client.post(
            BASE, json={"name": "Files", "url": "http://x", "auth_type": "api-key"}
        )
        assert response.json()["data"]["server"]["authType"] == "api-key"

    @pytest.mark.asyncio
    async def test_create_with_own_secret(self, authenticated_client, db_session, test_user):
        secret = await crud_secret.create_secret(db_session, test_user.id, "token", "sk-1234567890")

        response = await authenticated_client.post(
            BASE,
            json={"name": "Files", "url": "http://x", "authType": "bearer", "authSecretId": secret.id},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["server"]["authSecretId"] == secret.id

    @pytest.mark.asyncio
    async def test_create_with_foreign_secret_is_400(self, authenticated_client, db_session, other_user):
        secret = await crud_secret.create_secret(db_session, other_user.id, "token", "sk-1234567890")

        response = await authenticated_client.post(
            BASE,
            json={"name": "Files", "url": "http://x", "authType": "bearer", "authSecretId": secret.id},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_list_and_enabled(self, authenticated_client, db_session, test_user):
        await _create(db_session, test_user, name="on")
        await _create(db_session, test_user, name="off", enabled=False)

        all_servers = (await authenticated_client.get(BASE)).json()["data"]["servers"]
        enabled = (await authenticated_client.get(f"{BASE}/enabled")).json()["data"]["servers"]

        assert sorted(s["name"] for s in all_servers) == ["off", "on"]
        assert [s["name"] for s in enabled] == ["on"]

    @pytest.mark.asyncio
    async def test_update_cannot_set_status(self, authenticated_client, db_session, test_user):
        srv = await _create(db_session, test_user)

        response = await authenticated_client.put(
            f"{BASE}/{srv.id}", json={"description": "문서 서버", "status": "connected"}
        )

        assert response.status_code == status.HTTP_200_OK
        server = response.json()["data"]["server"]
        assert server["description"] == "문서 서버"
        assert server["status"] == "unknown"

    @pytest.mark.asyncio
    async def test_update_can_clear_secret(self, authenticated_client, db_session, test_user):
        secret = await crud_secret.create_secret(db_session, test_user.id, "token", "sk-1234567890")
        srv = await _create(db_session, test_user, auth_type="bearer", auth_secret_id=secret.id)

        response = await authenticated_client.put(f"{BASE}/{srv.id}", json={"authSecretId": None})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["server"]["authSecretId"] is None

    @pytest.mark.asyncio
    async def test_toggle_flips(self, authenticated_client, db_session, test_user):
        srv = await _create(db_session, test_user)

        first = await authenticated_client.patch(f"{BASE}/{srv.id}/toggle")
        second = await authenticated_client.patch(f"{BASE}/{srv.id}/toggle")

        assert first.json()["data"]["server"]["enabled"] is False
        assert second.json()["data"]["server"]["enabled"] is True

    @pytest.mark.asyncio
    async def test_delete(self, authenticated_client, db_session, test_user):
        srv = await _create(db_session, test_user)

        assert (await authenticated_client.delete(f"{BASE}/{srv.id}")).status_code == status.HTTP_200_OK
        assert (await authenticated_client.get(f"{BASE}/{srv.id}")).status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_foreign_server_is_404(self, authenticated_client, db_session, other_user):
        srv = await _create(db_session, other_user)
        url = f"{BASE}/{srv.id}"

        for response in [
            await authenticated_client.get(url),
            await authenticated_client.put(url, json={"name": "mine"}),
            await authenticated_client.patch(f"{url}/toggle"),
            await authenticated_client.delete(url),
        ]:
            assert response.status_code == status.HTTP_404_NOT_FOUND

        reloaded = await crud_mcp.get_server(db_session, other_user.id, srv.id)
        assert reloaded.enabled is True
        assert reloaded.name == "GitHub MCP"


class TestConnectionTestEndpoint:
    """POST /api/mcp/{id}/test"""

    @pytest.mark.asyncio
    async def test_connected_is_persisted(self, authenticated_client, db_session, test_user):
        srv = await _create(db_session, test_user)
        result = ProbeResult(status="connected", message="Connected successfully (12ms)", latency_ms=12)

        with patch(PROBE, new_callable=AsyncMock, return_value=result) as mock_probe:
            response = await authenticated_client.post(f"{BASE}/{srv.id}/test")

        mock_probe.assert_awaited_once_with("http://localhost:9000")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data == {
            "success": True,
            "status": "connected",
            "message": "Connected successfully (12ms)",
            "latencyMs": 12,
        }

        reloaded = await crud_mcp.get_server(db_session, test_user.id, srv.id)
        assert reloaded.status == "connected"
        assert reloaded.last_checked is not None
        assert reloaded.last_error is None

    @pytest.mark.asyncio
    async def test_error_is_persisted(self, authenticated_client, db_session, test_user):
        srv = await _create(db_session, test_user)
        result = ProbeResult(status="error", message="Server returned status 503", latency_ms=4)

        with patch(PROBE, new_callable=AsyncMock, return_value=result):
            response = await authenticated_client.post(f"{BASE}/{srv.id}/test")

        data = response.json()["data"]
        assert data["success"] is False
        assert data["status"] == "error"

        reloaded = await crud_mcp.get_server(db_session, test_user.id, srv.id)
        assert reloaded.status == "error"
        assert reloaded.last_error == "Server returned status 503"

    @pytest.mark.asyncio
    async def test_disconnected_is_200_not_500(self, authenticated_client, db_session, test_user):
        srv = await _create(db_session, test_user)
        result = ProbeResult(status="disconnected", message="Connection refused", latency_ms=1)

        with patch(PROBE, new_callable=AsyncMock, return_value=result):
            response = await authenticated_client.post(f"{BASE}/{srv.id}/test")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["status"] == "disconnected"

        reloaded = await crud_mcp.get_server(db_session, test_user.id, srv.id)
        assert reloaded.status == "disconnected"
        assert reloaded.last_error == "Connection refused"

    @pytest.mark.asyncio
    async def test_missing_server_is_404_without_probe(self, authenticated_client):
        with patch(PROBE, new_callable=AsyncMock) as mock_probe:
            response = await authenticated_client.post(f"{BASE}/nope/test")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        mock_probe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_open_transaction_while_probing(self, authenticated_client, db_session, test_user):
        srv = await _create(db_session, test_user)
        seen = {}

        async def fake_probe(url):
            seen["in_transaction"] = db_session.in_transaction()
            return ProbeResult(status="connected", message="Connected successfully (3ms)", latency_ms=3)

        with patch(PROBE, new=fake_probe):
            response = await authenticated_client.post(f"{BASE}/{srv.id}/test")

        assert response.status_code == status.HTTP_200_OK
        assert seen["in_transaction"] is False

        reloaded = await crud_mcp.get_server(db_session, test_user.id, srv.id)
        assert reloaded.status == "connected"

"""
auth.py API 엔드포인트 테스트
- 회원가입
- 로그인
- Rate Limiting
- Bearer 토큰 인증
"""
import pytest
from unittest.mock import AsyncMock, patch, MagicMock
from fastapi import status

from app.core.security import create_access_token


async def _login(client, username: str, password: str):
    return await client.post(
        "/api/auth/login",
        data={"username": username, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


class TestRegisterEndpoint:
    """회원가입 엔드포인트 테스트"""

    @pytest.mark.asyncio
    async def test_register_success(self, async_client, test_user_data):
        response = await async_client.post("/api/auth/register", json=test_user_data)

        assert response.status_code == status.HTTP_201_CREATED
        user = response.json()["data"]["user"]
        assert user["email"] == "new@example.com"
        assert user["isActive"] is True
        assert "hashedPassword" not in user

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, async_client, test_user_data):
        await async_client.post("/api/auth/register", json=test_user_data)
        response = await async_client.post("/api/auth/register", json=test_user_data)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"]["status"] == 409

    @pytest.mark.asyncio
    async def test_register_invalid_password(self, async_client):
        """숫자 없는 비밀번호 거부"""
        response = await async_client.post(
            "/api/auth/register",
            json={"email": "a@b.com", "password": "nodigitsatall", "name": "test"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "password" in response.json()["error"]["message"]

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, async_client):
        response = await async_client.post(
            "/api/auth/register",
            json={"email": "not-email", "password": "Pass1234", "name": "test"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestLoginEndpoint:
    """로그인 엔드포인트 테스트"""

    @pytest.mark.asyncio
    async def test_login_success(self, async_client, test_user):
        response = await _login(async_client, "test@example.com", "TestPass1")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0

        me = await async_client.get(
            "/api/projects", headers={"Authorization": f"Bearer {data['access_token']}"}
        )
        assert me.status_code == status.HTTP_200_OK

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, async_client, test_user):
        response = await _login(async_client, "test@example.com", "WrongPass1")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_login_nonexistent_user(self, async_client):
        response = await _login(async_client, "ghost@example.com", "Pass1234")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_login_inactive_user(self, async_client):
        """비활성 사용자 로그인 거부"""
        from app.core.security import get_password_hash

        with patch("app.api.endpoints.auth.get_user_by_email", new_callable=AsyncMock) as mock_get:
            mock_user = MagicMock()
            mock_user.email = "inactive@example.com"
            mock_user.hashed_password = get_password_hash("Pass1234")
            mock_user.is_active = False
            mock_get.return_value = mock_user

            response = await _login(async_client, "inactive@example.com", "Pass1234")

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestBearerAuthentication:
    """get_current_user 의존성"""

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, async_client):
        response = await async_client.get("/api/mcp", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers.get("www-authenticate") == "Bearer"

    @pytest.mark.asyncio
    async def test_token_for_unknown_user_is_401(self, async_client):
        token = create_access_token("nobody@example.com")
        response = await async_client.get("/api/mcp", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_inactive_user_is_403(self, async_client, db_session, test_user):
        test_user.is_active = False
        await db_session.commit()

        token = create_access_token(test_user.email)
        response = await async_client.get("/api/mcp", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestRateLimit:
    """Rate Limiting 테스트"""

    @pytest.mark.asyncio
    async def test_rate_limit_blocks(self, async_client):
        """Rate Limit 초과 시 429 반환"""
        with patch("app.api.endpoints.auth.get_rate_limiter") as mock_factory:
            mock_limiter = MagicMock()
            mock_limiter.check = AsyncMock(return_value=(False, 11, 45))
            mock_factory.return_value = mock_limiter

            response = await _login(async_client, "user@example.com", "Pass1234")

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.headers.get("retry-after") == "45"
        assert response.json()["error"]["status"] == 429

"""
security.py 단위 테스트
- 비밀번호 해싱/검증
- JWT 토큰 생성/검증
- 더미 해시 함수
"""
from datetime import timedelta
from jose import jwt

from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_access_token,
    get_dummy_hash,
)
from app.core.config import settings


class TestPasswordHashing:
    """비밀번호 해싱 테스트"""

    def test_hash_password(self):
        hashed = get_password_hash("MyPassword123")
        assert hashed != "MyPassword123"
        assert hashed.startswith("$2b$")

    def test_verify_correct_password(self):
        hashed = get_password_hash("MyPassword123")
        assert verify_password("MyPassword123", hashed) is True

    def test_verify_wrong_password(self):
        hashed = get_password_hash("CorrectPass123")
        assert verify_password("WrongPass123", hashed) is False

    def test_different_hashes_for_same_password(self):
        """같은 비밀번호라도 다른 해시 생성 (salt)"""
        assert get_password_hash("SamePassword123") != get_password_hash("SamePassword123")


class TestDummyHash:
    """더미 해시 테스트"""

    def test_dummy_hash_format(self):
        assert get_dummy_hash().startswith("$2b$")

    def test_dummy_hash_verifiable(self):
        """더미 해시에 대해 비밀번호 검증이 동작하는지 확인 (타이밍 공격 방지)"""
        assert verify_password("random_password", get_dummy_hash()) is False


class TestJWTToken:
    """JWT 토큰 테스트"""

    def test_round_trip(self):
        token = create_access_token("test@example.com")
        assert decode_access_token(token) == "test@example.com"

    def test_token_has_exp_and_iat(self):
        token = create_access_token("test@example.com")
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert "exp" in payload
        assert "iat" in payload

    def test_custom_expiration(self):
        """커스텀 만료 시간"""
        token = create_access_token("test@example.com", expires_delta=timedelta(minutes=5))
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        diff = payload["exp"] - payload["iat"]
        assert 290 <= diff <= 310

    def test_expired_token_rejected(self):
        token = create_access_token("test@example.com", expires_delta=timedelta(seconds=-10))
        assert decode_access_token(token) is None

    def test_wrong_key_rejected(self):
        token = jwt.encode({"sub": "test@example.com"}, "wrong-key-that-is-incorrect-1234567", algorithm="HS256")
        assert decode_access_token(token) is None

    def test_missing_subject_rejected(self):
        token = jwt.encode({"role": "admin"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        assert decode_access_token(token) is None

    def test_garbage_rejected(self):
        assert decode_access_token("not.a.jwt") is None

from datetime import timedelta

import pytest

from studyapi.core.exceptions import AuthenticationError, AuthorizationError
from studyapi.core.security import (
    ServiceRole,
    create_access_token,
    decode_access_token,
    require_service_role,
)


class TestAccessToken:
    """JWT 발급/검증 테스트"""

    def test_roundtrip(self, settings):
        token = create_access_token("alice", "alice@example.com", settings)

        identity = decode_access_token(token, settings)

        assert identity.user_id == "alice"
        assert identity.email == "alice@example.com"

    def test_expired_token(self, settings):
        token = create_access_token(
            "alice", "alice@example.com", settings, expires_delta=timedelta(minutes=-1)
        )

        with pytest.raises(AuthenticationError):
            decode_access_token(token, settings)

    def test_wrong_secret(self, settings):
        other = settings.model_copy(update={"JWT_SECRET_KEY": "another-secret"})
        token = create_access_token("alice", "alice@example.com", other)

        with pytest.raises(AuthenticationError):
            decode_access_token(token, settings)

    def test_garbage_token(self, settings):
        with pytest.raises(AuthenticationError):
            decode_access_token("not-a-jwt", settings)


class TestServiceRole:
    """원장 쓰기 capability 테스트"""

    def test_from_matching_key(self, settings):
        role = ServiceRole.from_key(settings.SERVICE_ROLE_KEY, settings)

        assert role.name == "service_key"

    @pytest.mark.parametrize("key", [None, "", "wrong-key"])
    def test_from_bad_key(self, settings, key):
        with pytest.raises(AuthorizationError):
            ServiceRole.from_key(key, settings)

    def test_require_service_role(self):
        role = ServiceRole.internal()

        assert require_service_role(role) is role
        with pytest.raises(AuthorizationError):
            require_service_role({"name": "internal"})

"""
Tests for registration, login and the session token contract.
"""
import time

import jwt
import pytest
from beanie import PydanticObjectId

from src.commonUtils.exceptionUtils import (
    AuthenticationFailure,
    AuthorizationFailure,
    Conflict,
    NotFound,
    ValidationFailure,
)
from src.config.settings import settings
from src.crud.userService import TokenStrategy, SessionGuard
from src.models.userModel import User


class TestRegister:
    async def test_register_stores_hashed_password(self, auth_service):
        user = await auth_service.register("Alice", "alice@example.com", "pw")

        stored = await User.get(user.id)
        assert stored.name == "Alice"
        assert stored.email == "alice@example.com"
        assert stored.hashed_password != "pw"
        assert stored.hashed_password.startswith("$2b$")

    async def test_register_normalises_email(self, auth_service):
        user = await auth_service.register("Alice", "Alice@Example.COM", "pw")
        assert user.email == "alice@example.com"

    async def test_duplicate_email_is_conflict(self, auth_service):
        await auth_service.register("Alice", "alice@example.com", "pw")

        with pytest.raises(Conflict):
            await auth_service.register("Alice Again", "alice@example.com", "other")

        assert await User.find(User.email == "alice@example.com").count() == 1

    async def test_duplicate_email_differing_in_case_is_conflict(self, auth_service):
        await auth_service.register("Alice", "alice@example.com", "pw")

        with pytest.raises(Conflict):
            await auth_service.register("Alice", "ALICE@example.com", "pw")

    @pytest.mark.parametrize(
        "name,email,password",
        [
            ("", "alice@example.com", "pw"),
            ("   ", "alice@example.com", "pw"),
            ("Alice", "not-an-email", "pw"),
            ("Alice", "alice@example.com", ""),
            (None, "alice@example.com", "pw"),
        ],
    )
    async def test_malformed_input_is_validation_failure(self, auth_service, name, email, password):
        with pytest.raises(ValidationFailure):
            await auth_service.register(name, email, password)

        assert await User.find_all().count() == 0

    async def test_password_of_72_bytes_registers_and_logs_in(self, auth_service):
        password = "p" * 72

        await auth_service.register("Alice", "alice@example.com", password)

        assert await auth_service.login("alice@example.com", password)

    async def test_multibyte_password_of_72_bytes_registers(self, auth_service):
        # 24 three-byte characters
        user = await auth_service.register("Alice", "alice@example.com", "\u20ac" * 24)
        assert user.id is not None

    @pytest.mark.parametrize("password", ["p" * 73, "x" * 100, "\u20ac" * 25])
    async def test_password_over_72_bytes_is_validation_failure(self, auth_service, password):
        with pytest.raises(ValidationFailure):
            await auth_service.register("Alice", "alice@example.com", password)

        assert await User.find_all().count() == 0


class TestLogin:
    async def test_login_returns_token_accepted_by_guard(self, auth_service):
        user = await auth_service.register("Alice", "alice@example.com", "pw")

        token = await auth_service.login("alice@example.com", "pw")

        guard = SessionGuard(auth_service.token_strategy)
        assert await guard(authorization=token) == user.id

    async def test_token_claims(self, auth_service):
        user = await auth_service.register("Alice", "alice@example.com", "pw")
        token = await auth_service.login("alice@example.com", "pw")

        claims = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=["HS256"], audience=settings.JWT_AUDIENCE
        )
        assert claims["id"] == str(user.id)
        assert abs(claims["exp"] - (time.time() + settings.JWT_LIFETIME_SECONDS)) < 60

    async def test_unknown_email_is_not_found(self, auth_service):
        with pytest.raises(NotFound):
            await auth_service.login("nobody@example.com", "pw")

    async def test_wrong_password_is_authentication_failure(self, auth_service):
        await auth_service.register("Alice", "alice@example.com", "pw")

        with pytest.raises(AuthenticationFailure):
            await auth_service.login("alice@example.com", "wrong")

    async def test_oversized_password_is_authentication_failure(self, auth_service):
        await auth_service.register("Alice", "alice@example.com", "pw")

        with pytest.raises(AuthenticationFailure):
            await auth_service.login("alice@example.com", "x" * 100)


class TestSessionGuard:
    @pytest.fixture
    def strategy(self):
        return TokenStrategy(secret="guard-secret-for-session-tests-0123456789", lifetime_seconds=3600, audience="solestyle:auth")

    @pytest.fixture
    def guard(self, strategy):
        return SessionGuard(strategy)

    async def test_missing_header(self, guard):
        with pytest.raises(AuthorizationFailure) as exc_info:
            await guard(authorization=None)
        assert exc_info.value.message == "No token"

    async def test_blank_header(self, guard):
        with pytest.raises(AuthorizationFailure) as exc_info:
            await guard(authorization="   ")
        assert exc_info.value.message == "No token"

    async def test_bearer_prefix_accepted(self, guard, strategy):
        user_id = PydanticObjectId()
        token = strategy.write_token(user_id)

        assert await guard(authorization=f"Bearer {token}") == user_id
        assert await guard(authorization=token) == user_id

    async def test_garbage_token(self, guard):
        with pytest.raises(AuthorizationFailure) as exc_info:
            await guard(authorization="not-a-jwt")
        assert exc_info.value.message == "Invalid token"

    async def test_token_signed_with_other_secret(self, guard):
        foreign = TokenStrategy(secret="someone-else-entirely-signing-tokens-987654", lifetime_seconds=3600, audience="solestyle:auth")

        with pytest.raises(AuthorizationFailure):
            await guard(authorization=foreign.write_token(PydanticObjectId()))

    async def test_token_for_other_audience(self, guard):
        foreign = TokenStrategy(secret="guard-secret-for-session-tests-0123456789", lifetime_seconds=3600, audience="elsewhere")

        with pytest.raises(AuthorizationFailure):
            await guard(authorization=foreign.write_token(PydanticObjectId()))

    async def test_expired_token_rejected_even_with_valid_signature(self, guard):
        expired = TokenStrategy(secret="guard-secret-for-session-tests-0123456789", lifetime_seconds=-60, audience="solestyle:auth")

        with pytest.raises(AuthorizationFailure):
            await guard(authorization=expired.write_token(PydanticObjectId()))

    async def test_token_without_valid_id_claim(self, guard):
        no_id = jwt.encode({"aud": "solestyle:auth"}, "guard-secret-for-session-tests-0123456789", algorithm="HS256")
        bad_id = jwt.encode({"aud": "solestyle:auth", "id": "123"}, "guard-secret-for-session-tests-0123456789", algorithm="HS256")

        for token in (no_id, bad_id):
            with pytest.raises(AuthorizationFailure):
                await guard(authorization=token)

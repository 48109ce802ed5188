import logging
from typing import Optional

import jwt
from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Header
from fastapi_users.jwt import decode_jwt, generate_jwt
from fastapi_users.password import PasswordHelper
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError

from src.commonUtils.exceptionUtils import (
    AuthenticationFailure,
    AuthorizationFailure,
    Conflict,
    NotFound,
    ValidationFailure,
)
from src.config.settings import Settings, settings
from src.models.userModel import User
from src.schemas.userSchema import MAX_PASSWORD_BYTES, UserCreate

logger = logging.getLogger(__name__)


def get_password_helper(rounds: int) -> PasswordHelper:
    return PasswordHelper(PasswordHash((BcryptHasher(rounds=rounds),)))


class TokenStrategy:
    """Signs and verifies the short-lived bearer token carrying a user id."""

    def __init__(self, secret: str, lifetime_seconds: int, audience: str):
        self.secret = secret
        self.lifetime_seconds = lifetime_seconds
        self.audience = audience

    def write_token(self, user_id: PydanticObjectId) -> str:
        data = {"id": str(user_id), "aud": self.audience}
        return generate_jwt(data, self.secret, self.lifetime_seconds)

    def read_token(self, token: str) -> PydanticObjectId:
        """Return the user id from a valid token; raise AuthorizationFailure otherwise."""
        try:
            data = decode_jwt(token, self.secret, [self.audience])
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired token")
            raise AuthorizationFailure("Invalid token")
        except jwt.PyJWTError as e:
            logger.debug(f"Rejected token: {e}")
            raise AuthorizationFailure("Invalid token")

        user_id = data.get("id")
        if not isinstance(user_id, str):
            raise AuthorizationFailure("Invalid token")
        try:
            return PydanticObjectId(user_id)
        except InvalidId:
            raise AuthorizationFailure("Invalid token")


class AuthService:
    """Registration and login flows"""

    def __init__(self, token_strategy: TokenStrategy, password_helper: PasswordHelper):
        self.token_strategy = token_strategy
        self.password_helper = password_helper

    @classmethod
    def from_settings(cls, config: Settings) -> "AuthService":
        return cls(
            token_strategy=TokenStrategy(
                secret=config.JWT_SECRET_KEY,
                lifetime_seconds=config.JWT_LIFETIME_SECONDS,
                audience=config.JWT_AUDIENCE,
            ),
            password_helper=get_password_helper(config.PASSWORD_HASH_ROUNDS),
        )

    async def register(self, name: str, email: str, password: str) -> User:
        try:
            user_data = UserCreate(name=name, email=email, password=password)
        except ValidationError as e:
            raise ValidationFailure(detail=e.errors(include_url=False, include_context=False, include_input=False))

        if await User.find_one(User.email == user_data.email):
            logger.info(f"Registration rejected, email already in use: {user_data.email}")
            raise Conflict("User already exists")

        user = User(
            name=user_data.name,
            email=user_data.email,
            hashed_password=self.password_helper.hash(user_data.password),
        )
        try:
            await user.insert()
        except DuplicateKeyError:
            # Lost a race with a concurrent registration for the same email
            logger.info(f"Registration rejected, email already in use: {user_data.email}")
            raise Conflict("User already exists")

        logger.info(f"User {user.id} has registered.")
        return user

    async def login(self, email: str, password: str) -> str:
        user = await User.find_one(User.email == email.strip().lower())
        if not user:
            logger.info(f"Login failed, unknown email: {email}")
            raise NotFound("User not found")

        # No stored hash can match a password bcrypt refuses to digest
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            logger.info(f"Login failed, oversized password for user {user.id}")
            raise AuthenticationFailure("Invalid password")

        is_correct, updated_hashed_password = self.password_helper.verify_and_update(
            password, user.hashed_password
        )
        if not is_correct:
            logger.info(f"Login failed, wrong password for user {user.id}")
            raise AuthenticationFailure("Invalid password")

        # If password hash needs to be updated (e.g. rounds changed)
        if updated_hashed_password:
            user.hashed_password = updated_hashed_password
            await user.save()

        logger.info(f"User {user.id} logged in.")
        return self.token_strategy.write_token(user.id)


class SessionGuard:
    """
    FastAPI dependency protecting cart routes.

    Accepts the raw token in the Authorization header, or the same token
    behind a "Bearer " scheme word, and resolves it to the user id.
    """

    def __init__(self, token_strategy: TokenStrategy):
        self.token_strategy = token_strategy

    async def __call__(self, authorization: Optional[str] = Header(default=None)) -> PydanticObjectId:
        token = (authorization or "").strip()
        scheme, _, credentials = token.partition(" ")
        if scheme.lower() == "bearer":
            token = credentials.strip()

        if not token:
            raise AuthorizationFailure("No token")

        return self.token_strategy.read_token(token)


auth_service = AuthService.from_settings(settings)


def get_auth_service() -> AuthService:
    return auth_service


current_user_id = SessionGuard(auth_service.token_strategy)

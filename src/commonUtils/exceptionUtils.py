"""
Error taxonomy for the store backend.

Services raise these instead of HTTPException so callers and tests can tell
a conflict from a malformed request. The handlers registered in src.main
turn them into ``{"message": ...}`` responses with the matching status.
"""
from typing import Any, Optional

from fastapi import status


class ShopError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Bad request"

    def __init__(self, message: Optional[str] = None, detail: Any = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationFailure(ShopError):
    default_message = "Validation error"


class Conflict(ShopError):
    default_message = "User already exists"


class NotFound(ShopError):
    default_message = "Not found"


class AuthenticationFailure(ShopError):
    default_message = "Invalid password"


class AuthorizationFailure(ShopError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token"


class InfrastructureFailure(ShopError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database unavailable"

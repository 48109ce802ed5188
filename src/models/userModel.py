from datetime import datetime
from typing import Optional

from beanie import Document, PydanticObjectId
from pydantic import Field, ConfigDict
from pymongo import ASCENDING, IndexModel


class User(Document):
    """Registered shopper"""
    id: Optional[PydanticObjectId] = Field(None, alias="_id")
    name: str = Field(..., min_length=1)
    email: str
    hashed_password: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"
        indexes = [
            IndexModel([("email", ASCENDING)], unique=True),
        ]

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Alice",
                "email": "alice@example.com",
                "hashed_password": "$2b$10$...",
            }
        },
    )

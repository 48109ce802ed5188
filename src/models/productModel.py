from datetime import datetime
from typing import Optional
from beanie import Document, PydanticObjectId
from pydantic import Field, ConfigDict
from pymongo import ASCENDING, DESCENDING, IndexModel


class Product(Document):
    """Product document in MongoDB"""
    id: Optional[PydanticObjectId] = Field(None, alias="_id")

    name: str = Field(..., min_length=1, max_length=200)
    brand: Optional[str] = None
    price: float = Field(..., ge=0)
    image: Optional[str] = None
    category: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "products"
        indexes = [
            IndexModel([("category", ASCENDING)]),
            IndexModel([("created_at", DESCENDING)]),
        ]

    model_config = ConfigDict(
        populate_by_name=True,  # Enable from_orm to work with ORM models
        from_attributes=True,  # This allows Pydantic to use aliases
    )

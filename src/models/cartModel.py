from datetime import datetime
from typing import Optional, List
from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field, ConfigDict
from pymongo import ASCENDING, IndexModel


class CartItem(BaseModel):
    """Individual item in cart"""
    product_id: str = Field(..., min_length=1)  # Not checked against the products collection
    quantity: int = Field(..., gt=0)


class Cart(Document):
    """Shopping cart for a user"""
    id: Optional[PydanticObjectId] = Field(None, alias="_id")
    user_id: PydanticObjectId  # Reference to User
    items: List[CartItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "carts"
        indexes = [
            IndexModel([("user_id", ASCENDING)], unique=True),  # One cart per user
        ]

    model_config = ConfigDict(populate_by_name=True)

    def find_item(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.product_id == product_id), None)

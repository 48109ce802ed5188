from datetime import datetime
from typing import Optional, List
from beanie import PydanticObjectId
from pydantic import AliasChoices, BaseModel, Field, ConfigDict


# ============= PRODUCT SCHEMAS =============
class ProductCreate(BaseModel):
    """Schema for creating a product"""
    name: str = Field(..., min_length=1, max_length=200)
    brand: Optional[str] = None
    price: float = Field(..., ge=0)
    image: Optional[str] = None
    category: Optional[str] = None


class ProductRead(BaseModel):
    """Schema for reading a product"""
    id: PydanticObjectId = Field(..., alias="_id")
    name: str
    brand: Optional[str] = None
    price: float
    image: Optional[str] = None
    category: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(
        populate_by_name=True,  # Enable from_orm to work with ORM models
        from_attributes=True,  # This allows Pydantic to use aliases
    )


# ============= CART SCHEMAS =============
class CartItemRead(BaseModel):
    """Schema for cart item in responses"""
    product_id: str = Field(..., serialization_alias="productId")
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class CartRead(BaseModel):
    """Schema for reading cart"""
    id: PydanticObjectId = Field(..., alias="_id")
    user_id: PydanticObjectId = Field(..., serialization_alias="userId")
    items: List[CartItemRead]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )


class CartAddItemRequest(BaseModel):
    """Schema for adding item to cart"""
    # Storefront clients send camelCase "productId"
    product_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("productId", "product_id"),
    )

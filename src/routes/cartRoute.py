from beanie import PydanticObjectId
from fastapi import APIRouter, Depends

from src.schemas.productSchema import CartRead, CartAddItemRequest
from src.crud.userService import current_user_id
from src.crud.cartService import CartService

router = APIRouter()


# ============= CART ROUTES =============
@router.get("/cart", response_model=CartRead)
async def get_cart(user_id: PydanticObjectId = Depends(current_user_id)):
    """Get current user's cart, creating an empty one on first access"""
    return await CartService.get_or_create_cart(user_id)


@router.post("/cart", response_model=CartRead)
async def add_to_cart(
        item: CartAddItemRequest,
        user_id: PydanticObjectId = Depends(current_user_id)
):
    """Add one unit of a product to the cart"""
    return await CartService.add_item(user_id, item.product_id)


@router.delete("/cart/{product_id}", response_model=CartRead)
async def remove_from_cart(
        product_id: str,
        user_id: PydanticObjectId = Depends(current_user_id)
):
    """Remove a product from the cart"""
    return await CartService.remove_item(user_id, product_id)

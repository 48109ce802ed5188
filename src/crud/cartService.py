import asyncio
import logging
import weakref
from datetime import datetime
from typing import List, Tuple

from beanie import PydanticObjectId
from pymongo.errors import DuplicateKeyError

from src.commonUtils.exceptionUtils import NotFound, ValidationFailure
from src.models.cartModel import Cart, CartItem

logger = logging.getLogger(__name__)

# One lock per user while a mutation for that user is in flight. Serialises
# read-modify-write cycles inside this process only.
_cart_locks: "weakref.WeakValueDictionary[PydanticObjectId, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(user_id: PydanticObjectId) -> asyncio.Lock:
    lock = _cart_locks.get(user_id)
    if lock is None:
        lock = asyncio.Lock()
        _cart_locks[user_id] = lock
    return lock


def _check_product_id(product_id: str) -> str:
    if not isinstance(product_id, str) or not product_id.strip():
        raise ValidationFailure("productId is required")
    return product_id


class CartService:
    """Service layer for cart operations"""

    @staticmethod
    async def _create_cart(user_id: PydanticObjectId, items: List[CartItem]) -> Tuple[Cart, bool]:
        """Insert a new cart, or return the one a concurrent request inserted first"""
        cart = Cart(user_id=user_id, items=items)
        try:
            await cart.insert()
        except DuplicateKeyError:
            existing = await Cart.find_one(Cart.user_id == user_id)
            if existing is None:
                raise
            return existing, False
        logger.info(f"Created cart {cart.id} for user {user_id}")
        return cart, True

    @staticmethod
    async def get_or_create_cart(user_id: PydanticObjectId) -> Cart:
        """Get existing cart or create new one"""
        cart = await Cart.find_one(Cart.user_id == user_id)

        if not cart:
            cart, _ = await CartService._create_cart(user_id, [])

        return cart

    @staticmethod
    async def add_item(user_id: PydanticObjectId, product_id: str) -> Cart:
        """Add one unit of a product, or increase its quantity if already in the cart"""
        _check_product_id(product_id)

        async with _lock_for(user_id):
            cart = await Cart.find_one(Cart.user_id == user_id)

            if not cart:
                cart, created = await CartService._create_cart(
                    user_id, [CartItem(product_id=product_id, quantity=1)]
                )
                if created:
                    return cart

            existing_item = cart.find_item(product_id)

            if existing_item:
                existing_item.quantity += 1
            else:
                cart.items.append(CartItem(product_id=product_id, quantity=1))

            cart.updated_at = datetime.utcnow()
            await cart.save()
            return cart

    @staticmethod
    async def remove_item(user_id: PydanticObjectId, product_id: str) -> Cart:
        """Remove a product's line item entirely; unknown products are a no-op"""
        _check_product_id(product_id)

        async with _lock_for(user_id):
            cart = await Cart.find_one(Cart.user_id == user_id)
            if not cart:
                raise NotFound("Cart not found")

            remaining = [item for item in cart.items if item.product_id != product_id]
            if len(remaining) == len(cart.items):
                return cart

            cart.items = remaining
            cart.updated_at = datetime.utcnow()
            await cart.save()
            return cart

from typing import List, Optional
from src.models.productModel import Product
from src.schemas.productSchema import ProductCreate


class ProductService:
    """Service layer for product operations"""

    @staticmethod
    async def create_product(product_data: ProductCreate) -> Product:
        product = Product(**product_data.model_dump())
        await product.insert()
        return product

    @staticmethod
    async def list_products(
            category: Optional[str] = None,
            skip: int = 0,
            limit: int = 100
    ) -> List[Product]:
        """Get products, newest first, with optional category filter"""
        query = {}

        if category:
            query["category"] = category

        # Beanie sort() expects tuple (field, direction)
        products = await (
            Product.find(query)
            .sort(("created_at", -1))
            .skip(skip)
            .limit(limit)
            .to_list()
        )
        return products

from fastapi import APIRouter, Query
from typing import List, Optional

from src.schemas.productSchema import ProductCreate, ProductRead
from src.crud.productService import ProductService

router = APIRouter()


@router.post("/products", response_model=ProductRead)
async def create_product(product_data: ProductCreate):
    """Create a product"""
    return await ProductService.create_product(product_data)


@router.get("/products", response_model=List[ProductRead])
async def list_products(
        category: Optional[str] = None,
        skip: int = Query(0, ge=0),
        limit: int = Query(100, ge=1, le=500)
):
    """List products, newest first"""
    return await ProductService.list_products(category=category, skip=skip, limit=limit)

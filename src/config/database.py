import logging

from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from src.models.productModel import Product
from src.models.cartModel import Cart
from src.models.userModel import User
from .settings import settings

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [User, Product, Cart]


# Call this from within your event loop to get beanie setup.
async def startDB() -> AsyncIOMotorClient:
    client = AsyncIOMotorClient(settings.MONGO_URI, uuidRepresentation="standard")
    database = client[settings.MONGO_DATABASE]

    # Creates the unique indexes on users.email and carts.user_id
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
    logger.info(f"MongoDB connected: {settings.MONGO_DATABASE}")
    return client

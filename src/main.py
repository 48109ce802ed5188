import uvicorn as uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError
import logging

from src.config.settings import settings
from src.config.database import startDB
from src.commonUtils.exceptionUtils import ShopError, ValidationFailure, InfrastructureFailure
from src.routes import userRoute, productRoute, cartRoute

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


# Initialize FastAPI app with lifespan context
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize database connection and models (startup logic)
    client = await startDB()
    logger.info(f"Server running on http://{settings.HOST}:{settings.PORT}")

    yield

    client.close()


app = FastAPI(
    title="SoleStyle API",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc"
)


def _error_body(exc: ShopError) -> dict:
    body = {"message": exc.message}
    if exc.detail is not None:
        body["detail"] = jsonable_encoder(exc.detail)
    return body


def _clean_errors(errors) -> list:
    # Drop echoed input (may hold the password) and non-serialisable ctx
    return [{k: v for k, v in err.items() if k not in ("input", "ctx", "url")} for err in errors]


async def shop_error_handler(request: Request, exc: ShopError):
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    failure = ValidationFailure(detail=_clean_errors(exc.errors()))
    return await shop_error_handler(request, failure)


async def storage_exception_handler(request: Request, exc: PyMongoError):
    logger.error(f"Storage error on {request.url.path}: {str(exc)}", exc_info=exc)
    failure = InfrastructureFailure()
    return JSONResponse(status_code=failure.status_code, content=_error_body(failure))


async def global_exception_handler(request: Request, exc: Exception):
    """Last resort for anything the handlers above do not cover"""
    logger.error(f"Unexpected error: {str(exc)}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


app.add_exception_handler(ShopError, shop_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(PyMongoError, storage_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(userRoute.router, tags=['auth'], prefix='/api')
app.include_router(productRoute.router, tags=['products'], prefix='/api')
app.include_router(cartRoute.router, tags=['cart'], prefix='/api')


@app.get("/api/healthchecker")
def root():
    return {"message": "Welcome to SoleStyle"}


if __name__ == "__main__":
    uvicorn.run("src.main:app", host=settings.HOST, port=settings.PORT, reload=not settings.is_production,
                log_level=settings.LOG_LEVEL.lower())

from fastapi import APIRouter, Depends

from src.crud.userService import AuthService, get_auth_service
from src.schemas.userSchema import UserCreate, LoginRequest, MessageResponse, TokenResponse

router = APIRouter()


@router.post("/register", response_model=MessageResponse)
async def register(payload: UserCreate, auth: AuthService = Depends(get_auth_service)):
    await auth.register(payload.name, payload.email, payload.password)
    return {"message": "User registered"}


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    token = await auth.login(payload.email, payload.password)
    return {"token": token}

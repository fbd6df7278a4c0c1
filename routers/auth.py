from fastapi import APIRouter, Depends, status

from database import get_store
from schemas import UserRegister, UserLogin, AuthResponse
import services

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, store=Depends(get_store)):
    """Register a new user"""
    user = services.create_user(store, user_data)
    return AuthResponse(message="User created successfully", user=user)


@router.post("/login", response_model=AuthResponse)
async def login(login_data: UserLogin, store=Depends(get_store)):
    """Check credentials and return the user without its password hash"""
    user = services.authenticate_user(store, login_data)
    return AuthResponse(message=f"Welcome back, {user.name}", user=user)

from fastapi import APIRouter, Depends

from database import get_store
from schemas import AvatarUpdate, AvatarResponse, UserListResponse
import services

router = APIRouter()


@router.post("/{user_id}/avatar", response_model=AvatarResponse)
async def set_avatar(user_id: str, avatar: AvatarUpdate, store=Depends(get_store)):
    """Set or replace the user's avatar image"""
    user = services.set_avatar(store, user_id, avatar.image)
    return AvatarResponse(is_set=user.is_avatar_image_set, image=user.avatar_image)


@router.get("/{user_id}/others", response_model=UserListResponse)
async def list_other_users(user_id: str, store=Depends(get_store)):
    """All users except the caller, public fields only"""
    return UserListResponse(users=services.list_other_users(store, user_id))

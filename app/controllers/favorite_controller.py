from fastapi import APIRouter, HTTPException, Depends, Response, status
from typing import List, Optional
from app.schemas.favorite import (
    FavoriteCreateRequest,
    FavoriteResponse,
    FavoriteWithPropertyResponse,
    FavoriteCheckResponse,
)
from app.services.favorite_service import (
    add_to_favorites,
    remove_from_favorites,
    get_user_favorites,
    is_property_favorited,
)
from app.services.property_service import get_property_owner_id
from app.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api/favorites", tags=["Favorites"])


@router.get("", response_model=List[FavoriteWithPropertyResponse])
async def list_favorites(user_id: str = Depends(get_current_user_id)):
    favorites = await get_user_favorites(user_id)
    return [FavoriteWithPropertyResponse(**favorite) for favorite in favorites]


@router.post("/{property_id}", response_model=FavoriteResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    property_id: int,
    request: Optional[FavoriteCreateRequest] = None,
    user_id: str = Depends(get_current_user_id)
):
    """Save a property; saving it again only updates the note"""
    if await get_property_owner_id(property_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )

    notes = request.notes if request else None
    favorite = await add_to_favorites(user_id, property_id, notes)
    return FavoriteResponse(**favorite)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    property_id: int,
    user_id: str = Depends(get_current_user_id)
):
    await remove_from_favorites(user_id, property_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{property_id}/check", response_model=FavoriteCheckResponse)
async def check_favorite(
    property_id: int,
    user_id: str = Depends(get_current_user_id)
):
    return FavoriteCheckResponse(is_favorited=await is_property_favorited(user_id, property_id))

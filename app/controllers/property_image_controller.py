import logging
from fastapi import APIRouter, HTTPException, Depends, Response, status
from app.controllers.property_controller import ensure_property_owner
from app.schemas.property import PropertyImageResponse, PropertyImageCreateRequest
from app.services.property_service import (
    create_property_image,
    get_property_image,
    get_property_owner_id,
    delete_property_image,
)
from app.services.cloudinary_service import delete_images_by_url
from app.utils.dependencies import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Property Images"])


@router.post(
    "/properties/{property_id}/images",
    response_model=PropertyImageResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_property_image(
    property_id: int,
    request: PropertyImageCreateRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Attach an image URL to a listing (owner only)"""
    await ensure_property_owner(property_id, user_id)

    image = await create_property_image(property_id, request.model_dump())
    return PropertyImageResponse(**image)


@router.delete("/property-images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_property_image(
    image_id: int,
    user_id: str = Depends(get_current_user_id)
):
    """Delete an image of one of the caller's listings; unknown ids are a no-op"""
    image = await get_property_image(image_id)
    if image is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    owner_id = await get_property_owner_id(image["property_id"])
    if owner_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized"
        )

    if await delete_property_image(image_id):
        await delete_images_by_url([image["image_url"]])

    return Response(status_code=status.HTTP_204_NO_CONTENT)

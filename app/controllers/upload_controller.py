"""
Upload Controller - Image upload/delete against blob storage
"""
import logging
from fastapi import APIRouter, HTTPException, Depends, UploadFile, File, Form, status
from typing import Optional
from app.config import settings
from app.schemas.base import MessageResponse
from app.schemas.upload import ImageUploadResponse, ImageDeleteRequest
from app.services.cloudinary_service import upload_image, delete_image, StorageError, DEFAULT_FOLDER
from app.utils.dependencies import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["Upload"])


@router.post("/image", response_model=ImageUploadResponse)
async def upload_image_endpoint(
    image: Optional[UploadFile] = File(None),
    folder: str = Form(DEFAULT_FOLDER),
    user_id: str = Depends(get_current_user_id)
):
    """
    Upload an image file
    Accepts image/* content types up to MAX_IMAGE_SIZE_MB
    """
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No image file provided"
        )

    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only image files are allowed"
        )

    file_content = await image.read()
    if len(file_content) > settings.max_image_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Image exceeds {settings.MAX_IMAGE_SIZE_MB}MB limit"
        )

    try:
        result = await upload_image(file_content, content_type, folder)
    except StorageError as e:
        logger.error(f"Image upload failed for {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload image"
        )

    return ImageUploadResponse(
        url=result["url"],
        key=result["key"],
        message="Image uploaded successfully"
    )


@router.delete("/image", response_model=MessageResponse)
async def delete_image_endpoint(
    request: ImageDeleteRequest,
    user_id: str = Depends(get_current_user_id)
):
    if not request.key.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image key is required"
        )

    if not await delete_image(request.key):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete image"
        )

    return MessageResponse(message="Image deleted successfully")

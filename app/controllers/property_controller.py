"""
Property Controller - Public listing queries and owner listing management
"""
import logging
from decimal import Decimal
from fastapi import APIRouter, HTTPException, Depends, Query, Response, status
from typing import Optional, List
from app.config import settings
from app.schemas.property import (
    PropertyResponse,
    PropertyWithStatsResponse,
    PropertyDetailResponse,
    PropertyCreateRequest,
    PropertyUpdateRequest,
)
from app.services.property_filters import UnknownAmenityError
from app.services.property_service import (
    list_properties,
    get_featured_properties,
    search_properties,
    get_property,
    get_property_owner_id,
    create_property,
    update_property,
    delete_property,
)
from app.services.cloudinary_service import delete_images_by_url
from app.utils.dependencies import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/properties", tags=["Properties"])


async def ensure_property_owner(property_id: int, user_id: str) -> None:
    """403 unless the caller owns the property; missing ids are treated the same"""
    owner_id = await get_property_owner_id(property_id)

    if owner_id is None or owner_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized"
        )


@router.get("", response_model=List[PropertyWithStatsResponse])
async def get_properties(
    location: Optional[str] = None,
    property_type: Optional[str] = Query(None, alias="propertyType"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    bedrooms: Optional[int] = Query(None, ge=0),
    bathrooms: Optional[int] = Query(None, ge=0),
    amenities: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
):
    """
    Available properties, newest first.

    Filters combine with AND; location matches address, city or state;
    bedrooms/bathrooms are minimums; every listed amenity must be present.
    """
    try:
        props = await list_properties(
            location=location,
            property_type=property_type,
            min_price=min_price,
            max_price=max_price,
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            amenities=amenities.split(",") if amenities else None,
            limit=limit or settings.DEFAULT_PAGE_SIZE,
            offset=offset,
        )
    except UnknownAmenityError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return [PropertyWithStatsResponse(**prop) for prop in props]


@router.get("/featured", response_model=List[PropertyWithStatsResponse])
async def get_featured():
    props = await get_featured_properties()
    return [PropertyWithStatsResponse(**prop) for prop in props]


@router.get("/search", response_model=List[PropertyWithStatsResponse])
async def search(q: Optional[str] = None):
    if not q or not q.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query is required"
        )

    props = await search_properties(q)
    return [PropertyWithStatsResponse(**prop) for prop in props]


@router.get("/{property_id}", response_model=PropertyDetailResponse)
async def get_property_detail(property_id: int):
    """Full detail with images, reviews and owner"""
    prop = await get_property(property_id)

    if not prop:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )

    return PropertyDetailResponse(**prop)


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property_endpoint(
    request: PropertyCreateRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Create a listing owned by the caller"""
    prop = await create_property(owner_id=user_id, property_data=request.model_dump())
    return PropertyResponse(**prop)


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property_endpoint(
    property_id: int,
    request: PropertyUpdateRequest,
    user_id: str = Depends(get_current_user_id)
):
    await ensure_property_owner(property_id, user_id)

    prop = await update_property(property_id, request.model_dump(exclude_unset=True))
    if not prop:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )

    return PropertyResponse(**prop)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property_endpoint(
    property_id: int,
    user_id: str = Depends(get_current_user_id)
):
    """Delete a listing with its dependents, then clean up stored images"""
    await ensure_property_owner(property_id, user_id)

    image_urls = await delete_property(property_id)
    if image_urls is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )

    await delete_images_by_url(image_urls)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from decimal import Decimal
from pydantic import Field
from typing import Optional, List, Literal
from app.schemas.base import ApiModel
from app.schemas.user import UserResponse
from app.schemas.review import ReviewResponse


PropertyType = Literal["apartment", "house", "condo", "townhouse"]


class PropertyImageResponse(ApiModel):
    id: int
    property_id: int
    image_url: str
    alt_text: Optional[str] = None
    is_primary: bool = False
    created_at: str


class PropertyImageCreateRequest(ApiModel):
    image_url: str = Field(..., min_length=1, max_length=500)
    alt_text: Optional[str] = Field(None, max_length=255)
    is_primary: bool = False


class PropertyResponse(ApiModel):
    id: int
    title: str
    description: Optional[str] = None
    price: str
    location: str
    city: str
    state: str
    zip_code: Optional[str] = None
    property_type: str
    bedrooms: int
    bathrooms: int
    square_footage: Optional[int] = None
    year_built: Optional[int] = None
    parking: bool = False
    pool: bool = False
    gym: bool = False
    pet_friendly: bool = False
    furnished: bool = False
    available: bool = True
    featured: bool = False
    owner_id: str
    created_at: str
    updated_at: str


class PropertyWithStatsResponse(PropertyResponse):
    images: List[PropertyImageResponse] = []
    primary_image: Optional[PropertyImageResponse] = None
    average_rating: float = 0
    review_count: int = 0


class PropertyDetailResponse(PropertyResponse):
    images: List[PropertyImageResponse] = []
    reviews: List[ReviewResponse] = []
    owner: Optional[UserResponse] = None
    average_rating: float = 0
    review_count: int = 0


class PropertyCreateRequest(ApiModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    location: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=10)
    property_type: PropertyType
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    square_footage: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = Field(None, ge=1000, le=3000)
    parking: bool = False
    pool: bool = False
    gym: bool = False
    pet_friendly: bool = False
    furnished: bool = False
    available: bool = True
    featured: bool = False


class PropertyUpdateRequest(ApiModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=10)
    property_type: Optional[PropertyType] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    square_footage: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = Field(None, ge=1000, le=3000)
    parking: Optional[bool] = None
    pool: Optional[bool] = None
    gym: Optional[bool] = None
    pet_friendly: Optional[bool] = None
    furnished: Optional[bool] = None
    available: Optional[bool] = None
    featured: Optional[bool] = None

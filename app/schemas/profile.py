from typing import List
from app.schemas.user import UserResponse
from app.schemas.property import PropertyWithStatsResponse
from app.schemas.review import ReviewResponse
from app.schemas.booking import BookingResponse
from app.schemas.favorite import FavoriteResponse
from app.schemas.history import SearchHistoryResponse, ViewingHistoryResponse


class UserProfileResponse(UserResponse):
    favorites: List[FavoriteResponse] = []
    search_history: List[SearchHistoryResponse] = []
    viewing_history: List[ViewingHistoryResponse] = []
    properties: List[PropertyWithStatsResponse] = []
    reviews: List[ReviewResponse] = []
    bookings: List[BookingResponse] = []

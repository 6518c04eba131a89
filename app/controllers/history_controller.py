from fastapi import APIRouter, HTTPException, Depends, Query, Response, status
from typing import List
from app.schemas.history import (
    SearchHistoryCreateRequest,
    SearchHistoryResponse,
    ViewingHistoryResponse,
    ViewingHistoryWithPropertyResponse,
)
from app.services.history_service import (
    DEFAULT_HISTORY_LIMIT,
    add_search_history,
    get_user_search_history,
    clear_search_history,
    add_viewing_history,
    get_user_viewing_history,
    clear_viewing_history,
)
from app.services.property_service import get_property_owner_id
from app.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api", tags=["History"])


@router.post("/search-history", response_model=SearchHistoryResponse, status_code=status.HTTP_201_CREATED)
async def record_search(
    request: SearchHistoryCreateRequest,
    user_id: str = Depends(get_current_user_id)
):
    record = await add_search_history(user_id, request.search_query, request.filters)
    return SearchHistoryResponse(**record)


@router.get("/search-history", response_model=List[SearchHistoryResponse])
async def list_searches(
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1),
    user_id: str = Depends(get_current_user_id)
):
    records = await get_user_search_history(user_id, limit)
    return [SearchHistoryResponse(**record) for record in records]


@router.delete("/search-history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_searches(user_id: str = Depends(get_current_user_id)):
    await clear_search_history(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/viewing-history/{property_id}",
    response_model=ViewingHistoryResponse,
    status_code=status.HTTP_201_CREATED
)
async def record_view(
    property_id: int,
    user_id: str = Depends(get_current_user_id)
):
    """Record a property view; repeat views refresh the timestamp"""
    if await get_property_owner_id(property_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )

    record = await add_viewing_history(user_id, property_id)
    return ViewingHistoryResponse(**record)


@router.get("/viewing-history", response_model=List[ViewingHistoryWithPropertyResponse])
async def list_views(
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1),
    user_id: str = Depends(get_current_user_id)
):
    records = await get_user_viewing_history(user_id, limit)
    return [ViewingHistoryWithPropertyResponse(**record) for record in records]


@router.delete("/viewing-history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_views(user_id: str = Depends(get_current_user_id)):
    await clear_viewing_history(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

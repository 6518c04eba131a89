from fastapi import APIRouter, status
from app.schemas.contact_message import ContactMessageCreateRequest, ContactMessageResponse
from app.services.contact_message_service import create_contact_message

router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post("", response_model=ContactMessageResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact_message(request: ContactMessageCreateRequest):
    """Public contact form"""
    record = await create_contact_message(request.model_dump())
    return ContactMessageResponse(**record)

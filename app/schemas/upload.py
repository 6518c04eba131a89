from app.schemas.base import ApiModel


class ImageUploadResponse(ApiModel):
    url: str
    key: str
    message: str


class ImageDeleteRequest(ApiModel):
    key: str

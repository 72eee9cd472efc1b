"""
Image upload and download endpoints.

Pin attachments are uploaded here first; the returned URL is then
stored in the pin's ``mediaFiles``.
"""

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status

from geojot_api.app.api.errors import to_http_exception
from geojot_api.app.core.config import settings
from geojot_api.app.core.security import get_current_user
from geojot_api.app.schemas.media import MediaRead
from geojot_api.app.services.errors import ServiceError
from geojot_api.app.services.media_service import MediaService

router = APIRouter()


async def read_upload(upload: UploadFile) -> bytes:
    """Read an upload, stopping one byte past the size limit."""
    return await upload.read(settings.max_upload_bytes + 1)


@router.post("", response_model=MediaRead, status_code=status.HTTP_201_CREATED)
async def upload_media(
    request: Request,
    file: UploadFile = File(...),
    current_user: dict = Depends(get_current_user),
) -> MediaRead:
    content = await read_upload(file)
    try:
        media_id = await MediaService.store_image(
            current_user["user_id"], file.filename, file.content_type, content
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    url = str(request.url_for("get_media", media_id=media_id))
    return MediaRead(url=url, title=file.filename or "upload")


@router.get("/{media_id}", name="get_media")
async def get_media(media_id: int) -> Response:
    try:
        content_type, content = await MediaService.get_image(media_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return Response(content=content, media_type=content_type)

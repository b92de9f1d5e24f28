"""
Thumbnail and video upload endpoints.
Order: bearer token -> ownership -> body size -> multipart form -> pipeline.
The size cap is applied to Content-Length and to the body stream itself while the form is parsed.
The form is parsed by hand (not File(...)) so the ownership check always runs first.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException
from starlette.types import Message
from tubely.auth import get_current_user_id
from tubely.database import get_db
from tubely.errors import BadRequest
from tubely.repositories.video_repository import get_owned_video
from tubely.schemas.video import ErrorResponse, VideoResponse
from tubely.services.upload_pipeline import UploadPipeline

router = APIRouter(prefix="/api", tags=["uploads"])

ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 401, 403, 500)}


def get_upload_pipeline(request: Request) -> UploadPipeline:
    return request.app.state.upload_pipeline


def _too_large(max_bytes: int) -> BadRequest:
    return BadRequest(f"Upload exceeds the {max_bytes} byte limit")


def _check_content_length(request: Request, max_bytes: int) -> None:
    length = request.headers.get("content-length")
    if length and length.isdigit() and int(length) > max_bytes:
        raise _too_large(max_bytes)


def _limit_body(request: Request, max_bytes: int) -> Request:
    """Request whose body stream raises BadRequest once more than max_bytes have arrived (chunked bodies)."""
    receive = request.receive
    received = 0

    async def limited_receive() -> Message:
        nonlocal received
        message = await receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > max_bytes:
                raise _too_large(max_bytes)
        return message

    return Request(request.scope, receive=limited_receive)


async def _read_upload_form(request: Request, field: str, max_bytes: int) -> tuple[FormData, UploadFile]:
    _check_content_length(request, max_bytes)
    try:
        form = await _limit_body(request, max_bytes).form(max_files=1)
    except (StarletteHTTPException, MultiPartException) as e:
        raise BadRequest("Couldn't parse form", detail=str(getattr(e, "detail", e))) from e
    upload = form.get(field)
    if not isinstance(upload, UploadFile):
        await form.close()
        raise BadRequest(f"Missing {field} file")
    return form, upload


@router.post("/thumbnail_upload/{video_id}", response_model=VideoResponse, responses=ERROR_RESPONSES)
async def upload_thumbnail(
    video_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    pipeline: UploadPipeline = Depends(get_upload_pipeline),
):
    """Multipart field `thumbnail` (image/jpeg or image/png). Returns the updated video."""
    video = await run_in_threadpool(get_owned_video, db, video_id, user_id)
    form, upload = await _read_upload_form(request, "thumbnail", pipeline.settings.max_thumbnail_upload_bytes)
    try:
        video = await run_in_threadpool(pipeline.upload_thumbnail, db, video, upload)
    finally:
        await form.close()
    return VideoResponse.model_validate(video)


@router.post("/video_upload/{video_id}", response_model=VideoResponse, responses=ERROR_RESPONSES)
async def upload_video(
    video_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    pipeline: UploadPipeline = Depends(get_upload_pipeline),
):
    """Multipart field `video` (video/mp4). Remuxed for fast start, stored in S3 under <orientation>/<key>.mp4."""
    video = await run_in_threadpool(get_owned_video, db, video_id, user_id)
    form, upload = await _read_upload_form(request, "video", pipeline.settings.max_video_upload_bytes)
    try:
        video = await run_in_threadpool(pipeline.upload_video, db, video, upload)
    finally:
        await form.close()
    return VideoResponse.model_validate(video)

"""Video records owned by the caller: create a draft, list, get, delete."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from tubely.auth import get_current_user_id
from tubely.database import get_db
from tubely.errors import BadRequest
from tubely.repositories.video_repository import (
    create_video,
    delete_video,
    get_owned_video,
    list_videos_for_user,
)
from tubely.schemas.video import VideoCreate, VideoResponse

router = APIRouter(prefix="/api/videos", tags=["videos"])


@router.post("", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
def create_draft_video(
    body: VideoCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    title = body.title.strip()
    if not title:
        raise BadRequest("Title is required")
    video = create_video(db, user_id, title, (body.description or "").strip() or None)
    return VideoResponse.model_validate(video)


@router.get("", response_model=list[VideoResponse])
def list_videos(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return [VideoResponse.model_validate(v) for v in list_videos_for_user(db, user_id)]


@router.get("/{video_id}", response_model=VideoResponse)
def get_video(
    video_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return VideoResponse.model_validate(get_owned_video(db, video_id, user_id))


@router.delete("/{video_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_video(
    video_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Deletes the record only; stored thumbnail and video files are kept."""
    delete_video(db, get_owned_video(db, video_id, user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

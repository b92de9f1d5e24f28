"""
Video record store. All operations are sync (called from sync endpoints or the threadpool).
Ownership: video.user_id == caller; upload and detail APIs go through get_owned_video.
"""
import logging
import uuid

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tubely.errors import BadRequest, Forbidden, NotFound, PersistFailed
from tubely.models.video import Video

logger = logging.getLogger(__name__)


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


def get_video(db: Session, video_id: str) -> Video:
    if not _is_uuid(video_id):
        raise BadRequest("Invalid ID", detail=f"invalid video id {video_id!r}")
    video = db.query(Video).filter(Video.id == video_id).first()
    if video is None:
        raise NotFound(detail=f"video {video_id} does not exist")
    return video


def get_owned_video(db: Session, video_id: str, user_id: str) -> Video:
    """Resolve the video and check the caller owns it. Raises BadRequest (malformed id) / NotFound / Forbidden."""
    video = get_video(db, video_id)
    if video.user_id != user_id:
        raise Forbidden(detail=f"user {user_id} does not own video {video_id}")
    return video


def create_video(db: Session, user_id: str, title: str, description: str | None) -> Video:
    video = Video(user_id=user_id, title=title, description=description)
    db.add(video)
    update_video(db, video)
    return video


def list_videos_for_user(db: Session, user_id: str) -> list[Video]:
    return (
        db.query(Video)
        .filter(Video.user_id == user_id)
        .order_by(desc(Video.created_at))
        .all()
    )


def update_video(db: Session, video: Video) -> Video:
    """Persist the in-memory record. Rolls back and raises PersistFailed on database errors."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Couldn't persist video %s: %s", video.id, e)
        raise PersistFailed(detail=str(e)) from e
    db.refresh(video)
    return video


def delete_video(db: Session, video: Video) -> None:
    try:
        db.delete(video)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistFailed("Couldn't delete video", detail=str(e)) from e

"""
Thumbnail and video upload pipelines.

Thumbnail: validate type -> stage -> key -> write under assets_root -> update record.
Video:     validate type -> stage -> ffprobe (orientation) -> ffmpeg faststart -> key
           -> S3 put -> update record.

The first failure raises and aborts the remaining steps; nothing is retried.
Scratch files (staged upload and ffmpeg output) are removed on every exit path.
An object uploaded before a failed record update is left in storage.
"""
import logging

from sqlalchemy.orm import Session

from tubely.config import Settings
from tubely.errors import StagingError
from tubely.models.video import Video
from tubely.repositories.video_repository import update_video
from tubely.services.asset_store import LocalAssetStore
from tubely.services.media_tools import FFmpegNormalizer, FFprobeInspector, MediaInspector, MediaNormalizer
from tubely.services.media_types import THUMBNAIL_TYPES, VIDEO_TYPES, resolve_media_kind
from tubely.services.object_store import S3ObjectStore
from tubely.services.staging import staged_upload
from tubely.services.storage_keys import generate_storage_key

logger = logging.getLogger(__name__)


class UploadPipeline:
    def __init__(
        self,
        settings: Settings,
        inspector: MediaInspector,
        normalizer: MediaNormalizer,
        object_store: S3ObjectStore,
        asset_store: LocalAssetStore,
    ):
        self.settings = settings
        self.inspector = inspector
        self.normalizer = normalizer
        self.object_store = object_store
        self.asset_store = asset_store

    def video_url_for(self, key: str) -> str:
        return f"https://{self.settings.s3_cf_distribution}/{key}"

    def upload_thumbnail(self, db: Session, video: Video, upload) -> Video:
        """upload: anything with .file and .content_type (Starlette UploadFile)."""
        kind = resolve_media_kind(upload.content_type, THUMBNAIL_TYPES)
        with staged_upload(
            upload.file,
            max_bytes=self.settings.max_thumbnail_upload_bytes,
            suffix=kind.extension,
            staging_dir=self.settings.staging_dir,
        ) as (staged, staged_path):
            logger.info("video %s: thumbnail staged at %s", video.id, staged_path)
            filename = generate_storage_key(kind.extension)
            self.asset_store.save(filename, staged)
        logger.info("video %s: thumbnail stored as %s", video.id, filename)

        video.thumbnail_url = self.asset_store.url_for(filename)
        update_video(db, video)
        logger.info("video %s: thumbnail_url updated", video.id)
        return video

    def upload_video(self, db: Session, video: Video, upload) -> Video:
        kind = resolve_media_kind(upload.content_type, VIDEO_TYPES)
        with staged_upload(
            upload.file,
            max_bytes=self.settings.max_video_upload_bytes,
            suffix=kind.extension,
            staging_dir=self.settings.staging_dir,
        ) as (_staged, staged_path):
            logger.info("video %s: upload staged at %s", video.id, staged_path)

            orientation = self.inspector.inspect(staged_path).orientation
            logger.info("video %s: orientation %s", video.id, orientation)

            processed_path = self.normalizer.normalize(staged_path)
            try:
                logger.info("video %s: faststart remux written to %s", video.id, processed_path)
                key = generate_storage_key(kind.extension, prefix=orientation)
                try:
                    processed = processed_path.open("rb")
                except OSError as e:
                    raise StagingError("Couldn't open processed video", detail=str(e)) from e
                with processed:
                    self.object_store.put(key, processed, kind.content_type)
            finally:
                processed_path.unlink(missing_ok=True)

        video.video_url = self.video_url_for(key)
        update_video(db, video)
        logger.info("video %s: video_url updated to %s", video.id, video.video_url)
        return video


def build_upload_pipeline(settings: Settings) -> UploadPipeline:
    return UploadPipeline(
        settings=settings,
        inspector=FFprobeInspector(settings),
        normalizer=FFmpegNormalizer(settings),
        object_store=S3ObjectStore(settings),
        asset_store=LocalAssetStore(settings),
    )

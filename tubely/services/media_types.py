"""Allow-lists for declared upload content types. No byte sniffing: the header is trusted."""
from dataclasses import dataclass

from tubely.errors import UnsupportedMediaType


@dataclass(frozen=True)
class MediaKind:
    content_type: str
    extension: str


JPEG = MediaKind("image/jpeg", ".jpg")
PNG = MediaKind("image/png", ".png")
MP4 = MediaKind("video/mp4", ".mp4")

THUMBNAIL_TYPES = {kind.content_type: kind for kind in (JPEG, PNG)}
VIDEO_TYPES = {kind.content_type: kind for kind in (MP4,)}


def parse_media_type(content_type: str | None) -> str:
    """'Video/MP4; codecs=avc1' -> 'video/mp4'. Empty string if not type/subtype."""
    media_type = (content_type or "").split(";")[0].strip().lower()
    main, sep, sub = media_type.partition("/")
    if not sep or not main or not sub or "/" in sub or " " in media_type:
        return ""
    return media_type


def resolve_media_kind(content_type: str | None, allowed: dict[str, MediaKind]) -> MediaKind:
    media_type = parse_media_type(content_type)
    if not media_type:
        raise UnsupportedMediaType(detail=f"invalid Content-Type header: {content_type!r}")
    kind = allowed.get(media_type)
    if kind is None:
        raise UnsupportedMediaType(detail=f"unsupported media type: {media_type}")
    return kind

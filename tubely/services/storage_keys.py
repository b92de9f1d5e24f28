"""Random, URL-safe storage keys for uploaded assets."""
import base64
import secrets

from tubely.errors import EntropyUnavailable

KEY_BYTES = 32


def generate_storage_key(extension: str, prefix: str = "") -> str:
    """
    32 random bytes, URL-safe base64 without padding, plus the file extension.
    prefix is an orientation bucket like "landscape/" for videos, empty for thumbnails.
    """
    try:
        raw = secrets.token_bytes(KEY_BYTES)
    except (NotImplementedError, OSError) as e:
        raise EntropyUnavailable(detail=f"couldn't generate random bytes: {e}") from e
    name = base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
    return f"{prefix}{name}{extension}"

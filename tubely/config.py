from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./tubely.db"

    # JWT
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60  # 1 hour

    # HTTP
    port: int = 8091
    frontend_url: str = "http://localhost:3000"
    log_level: str = "INFO"

    # Thumbnails: written under assets_root, served at /assets/<filename>
    assets_root: str = "./assets"
    # Public base for thumbnail URLs (empty = http://localhost:<port>)
    assets_base_url: str = ""

    # Scratch dir for staged uploads (empty = system temp dir)
    staging_dir: str = ""
    max_video_upload_bytes: int = 1 << 30  # 1 GB
    max_thumbnail_upload_bytes: int = 10 << 20  # 10 MB

    # External media tools
    ffprobe_path: str = "ffprobe"
    ffmpeg_path: str = "ffmpeg"
    media_tool_timeout_seconds: int = 600

    # S3 (empty endpoint = AWS; set for MinIO etc.)
    s3_bucket: str = "tubely-videos"
    s3_region: str = "us-east-1"
    s3_endpoint_url: str = ""
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    # CloudFront distribution domain in front of the bucket
    s3_cf_distribution: str = "localhost"

    class Config:
        env_file = ".env"

    @property
    def thumbnail_base_url(self) -> str:
        return (self.assets_base_url or f"http://localhost:{self.port}").rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()

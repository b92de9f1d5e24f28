"""Thumbnails live on local disk under assets_root and are served by the /assets static mount."""
import shutil
from pathlib import Path
from typing import BinaryIO

from tubely.config import Settings
from tubely.errors import StoreUnavailable


class LocalAssetStore:
    def __init__(self, settings: Settings):
        self.root = Path(settings.assets_root)
        self.base_url = settings.thumbnail_base_url

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        return self.root / filename

    def url_for(self, filename: str) -> str:
        return f"{self.base_url}/assets/{filename}"

    def save(self, filename: str, src: BinaryIO) -> Path:
        path = self.path_for(filename)
        try:
            self.ensure_root()
            with path.open("wb") as f:
                shutil.copyfileobj(src, f)
        except OSError as e:
            path.unlink(missing_ok=True)
            raise StoreUnavailable("Couldn't save thumbnail", detail=str(e)) from e
        return path

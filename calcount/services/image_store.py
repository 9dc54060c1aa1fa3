"""
Local image store for food photos.

Files live under media_root and are served by StaticFiles at url_prefix.
"""
import base64
import logging
from pathlib import Path
from typing import Optional
from uuid import uuid4

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/heic": "heic",
}
_CONTENT_TYPE_BY_EXT = {
    "jpg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "heic": "image/heic",
}


class ImageStoreError(RuntimeError):
    pass


class ImageStore:
    def __init__(self, root: Path, url_prefix: str = "/media", max_bytes: int = 10 * 1024 * 1024):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def put(self, data: bytes, content_type: str, user_id: int) -> str:
        """
        Store the image and return its URL.
        Bad content type, empty or oversized data -> ValueError.
        """
        content_type = (content_type or "").split(";")[0].strip().lower()
        ext = ALLOWED_CONTENT_TYPES.get(content_type)
        if ext is None:
            raise ValueError(f"Unsupported image type: {content_type or 'unknown'}")
        if not data:
            raise ValueError("Empty image")
        if len(data) > self.max_bytes:
            raise ValueError(f"Image exceeds {self.max_bytes // (1024 * 1024)} MB")

        key = f"food-images/{user_id}/{uuid4().hex}.{ext}"
        path = self.root / key
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"[IMAGES] Failed to write {path}: {e}")
            raise ImageStoreError("Could not store image")

        logger.info(f"[IMAGES] Stored {len(data)} bytes as {key}")
        return f"{self.url_prefix}/{key}"

    def is_local(self, url: str) -> bool:
        return url.startswith(f"{self.url_prefix}/")

    def _local_path(self, url: str, user_id: int) -> Optional[Path]:
        """Path of a stored image owned by user_id; None for anything else."""
        if not self.is_local(url):
            return None
        relative = url[len(self.url_prefix) + 1:]
        owner_root = (self.root / "food-images" / str(user_id)).resolve()
        path = (self.root.resolve() / relative).resolve()
        if owner_root not in path.parents or not path.is_file():
            return None
        return path

    def as_data_url(self, url: str, user_id: int) -> Optional[str]:
        """
        data: URL for an image user_id stored here (the LLM cannot fetch our
        local URLs). None for remote URLs, missing files and other users'
        images.
        """
        path = self._local_path(url, user_id)
        if path is None:
            return None
        content_type = _CONTENT_TYPE_BY_EXT.get(path.suffix.lstrip(".").lower(), "image/jpeg")
        encoded = base64.b64encode(path.read_bytes()).decode("ascii")
        return f"data:{content_type};base64,{encoded}"

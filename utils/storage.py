"""
Public image store

Images live under <root>/public and are served read-only by the app under
/uploads. File names derive from the uploading session and the current time,
keeping the original extension.
"""
import logging
import os
import time
from pathlib import Path

from utils.errors import UploadError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif"}
MOUNT_PATH = "/uploads"


def file_extension(filename: str) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


class ImageStore:
    def __init__(self, root: str, base_url: str = "", max_bytes: int = 5 * 1024 * 1024):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes

    def ensure_root(self) -> None:
        (self.root / "public").mkdir(parents=True, exist_ok=True)

    def object_name(self, session_id: str, filename: str) -> str:
        return f"public/{session_id}-{int(time.time() * 1000)}.{file_extension(filename)}"

    def public_url(self, object_name: str) -> str:
        return f"{self.base_url}{MOUNT_PATH}/{object_name}"

    def upload(self, session_id: str, filename: str, data: bytes) -> str:
        """
        Store an image and return its public URL

        Raises:
            UploadError: If the file cannot be written or would land outside
                the public directory
        """
        object_name = self.object_name(session_id, filename)
        path = self.root / object_name
        public_dir = (self.root / "public").resolve()
        if path.resolve().parent != public_dir:
            logger.warning("Refusing image path outside the store: %s", object_name)
            raise UploadError(filename, ValueError(f"{object_name} is outside the image store"))

        try:
            self.ensure_root()
            with open(path, "xb") as fh:
                fh.write(data)
        except OSError as e:
            logger.exception("Error uploading image %s", object_name)
            raise UploadError(filename, e) from e

        logger.info("Stored image %s (%d bytes)", object_name, len(data))
        return self.public_url(object_name)


def image_store_from_env() -> ImageStore:
    return ImageStore(
        root=os.getenv("UPLOAD_DIR", "./uploads"),
        base_url=os.getenv("PUBLIC_BASE_URL", ""),
        max_bytes=int(os.getenv("MAX_IMAGE_BYTES", 5 * 1024 * 1024)),
    )

from abc import ABC, abstractmethod
from pathlib import Path

import requests

from app.core.config import settings
from app.core.errors import StoreError
from app.core.logging_config import logger


class BlobStore(ABC):
    """Object storage for quiz images, addressed by ``<quizId>/<name>`` paths."""

    @abstractmethod
    def put(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` at ``path``, replacing any previous object, and return its public URL."""


class LocalBlobStore(BlobStore):
    def __init__(self, root: str, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def put(self, path: str, data: bytes, content_type: str) -> str:
        target = self.root / path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write blob {path}: {e}", exc_info=True)
            raise StoreError("Failed to store image") from e
        return f"{self.public_base_url}/{path}"


class SupabaseBlobStore(BlobStore):
    def __init__(self, url: str, service_key: str, bucket: str, timeout: float = 10.0):
        self.url = url.rstrip("/")
        self.service_key = service_key
        self.bucket = bucket
        self.timeout = timeout

    def public_url(self, path: str) -> str:
        return f"{self.url}/storage/v1/object/public/{self.bucket}/{path}"

    def put(self, path: str, data: bytes, content_type: str) -> str:
        try:
            response = requests.post(
                f"{self.url}/storage/v1/object/{self.bucket}/{path}",
                data=data,
                headers={
                    "Authorization": f"Bearer {self.service_key}",
                    "apikey": self.service_key,
                    "Content-Type": content_type,
                    "x-upsert": "true",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Storage upload failed for {path}: {e}", exc_info=True)
            raise StoreError("Failed to store image") from e
        return self.public_url(path)


def get_blob_store() -> BlobStore:
    if settings.BLOB_BACKEND == "supabase":
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for the supabase blob backend")
        return SupabaseBlobStore(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            settings.BLOB_BUCKET,
            timeout=settings.STORE_TIMEOUT_SECONDS,
        )
    return LocalBlobStore(
        settings.BLOB_LOCAL_DIR,
        settings.PUBLIC_BASE_URL.rstrip("/") + settings.BLOB_PUBLIC_PATH,
    )

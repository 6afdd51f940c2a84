# market/services/storage.py
from datetime import datetime, timedelta, timezone

from market.utils.settings import DOWNLOAD_LINK_TTL_SECONDS, STORAGE_BASE_URL


class BlobStorage:
    """URLs for book files and covers in the blob store."""

    def __init__(self, base_url: str = STORAGE_BASE_URL, link_ttl: int = DOWNLOAD_LINK_TTL_SECONDS):
        self.base_url = base_url.rstrip("/")
        self.link_ttl = link_ttl

    def placeholder_urls(self, file_format: str) -> tuple[str, str]:
        stamp = int(datetime.now(timezone.utc).timestamp() * 1000)
        return (
            f"{self.base_url}/books/{stamp}.{file_format}",
            f"{self.base_url}/covers/{stamp}.jpg",
        )

    def download_link(self, file_url: str | None) -> tuple[str, datetime]:
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=self.link_ttl)
        return file_url or "", expires_at

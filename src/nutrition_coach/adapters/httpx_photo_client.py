"""Photo download client for URLs and data URIs."""

import base64
import binascii
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes

import httpx

from nutrition_coach.services.nutrition import PhotoClient


@dataclass
class HttpxPhotoClient(PhotoClient):
    """Photo client using httpx for remote URLs."""

    http_client: httpx.AsyncClient
    timeout_seconds: float = 20.0

    @classmethod
    def create(cls, timeout_seconds: float = 20.0) -> "HttpxPhotoClient":
        """Create a photo client with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout_seconds=timeout_seconds,
        )

    async def fetch_bytes(self, photo_ref: str) -> bytes:
        """Return the raw bytes behind a photo URL or data URI."""
        if photo_ref.startswith("data:"):
            return _decode_data_uri(photo_ref)
        response = await self.http_client.get(photo_ref, timeout=self.timeout_seconds)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _decode_data_uri(data_uri: str) -> bytes:
    header, sep, data = data_uri.partition(",")
    if not sep:
        raise ValueError("Malformed data URI")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(data, validate=True)
        except binascii.Error as exc:
            raise ValueError("Invalid base64 payload in data URI") from exc
    return unquote_to_bytes(data)

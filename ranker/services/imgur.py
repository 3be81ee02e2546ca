"""
Image hosting — uploads base64 profile images to Imgur.
"""

import asyncio
import logging

import requests

from ranker.config import settings
from ranker.errors import UpstreamError

logger = logging.getLogger(__name__)

IMGUR_UPLOAD_URL = "https://api.imgur.com/3/image"


def _strip_data_url(image: str) -> str:
    """Drop a ``data:image/...;base64,`` prefix if the browser sent one."""
    if "base64," in image:
        return image.split("base64,", 1)[1]
    return image


class ImgurUploader:
    def __init__(self, client_id: str = ""):
        self.client_id = client_id or settings.IMGUR_CLIENT_ID

    def _upload_sync(self, base64_image: str) -> str:
        resp = requests.post(
            IMGUR_UPLOAD_URL,
            headers={"Authorization": f"Client-ID {self.client_id}"},
            json={"image": _strip_data_url(base64_image), "type": "base64"},
            timeout=30,
        )
        try:
            payload = resp.json()
        except ValueError:
            payload = {}

        if not resp.ok:
            error = (payload.get("data") or {}).get("error") or "Failed to upload image to Imgur"
            if isinstance(error, dict):
                error = error.get("message") or "Failed to upload image to Imgur"
            raise UpstreamError(str(error))

        return payload["data"]["link"]

    async def upload(self, base64_image: str) -> str:
        """Upload the image and return its public URL."""
        try:
            return await asyncio.to_thread(self._upload_sync, base64_image)
        except UpstreamError:
            logger.warning("Imgur rejected the profile image upload")
            raise
        except (requests.RequestException, KeyError, TypeError) as e:
            logger.exception("Imgur upload failed")
            raise UpstreamError("Failed to upload image to Imgur") from e


_uploader = ImgurUploader()


def get_image_host() -> ImgurUploader:
    """FastAPI dependency, overridden in tests."""
    return _uploader

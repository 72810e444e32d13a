"""Client for the third-party image host.

The host stores image bytes and answers an upload with a public link and a
delete hash; the delete hash is the only handle able to remove that image
later. The client keeps no state besides its HTTP session.
"""
import logging
from dataclasses import dataclass

import requests
from fastapi import Request

logger = logging.getLogger(__name__)


class MediaDelegateError(Exception):
    """The image host could not be reached or refused the request."""


@dataclass(frozen=True)
class ImageRef:
    url: str
    delete_hash: str


class ImgurClient:
    def __init__(self, client_id: str, base_url: str = "https://api.imgur.com/3", timeout: int = 30,
                 session: requests.Session = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f'Client-ID {client_id}',
            'Accept': 'application/json',
        })

    def _request(self, method: str, endpoint: str, **kwargs) -> dict:
        url = f"{self.base_url}/{endpoint}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.warning("Image host unreachable: %s", e)
            raise MediaDelegateError(f"Image host unreachable: {e}") from e

        if not response.ok:
            logger.warning("Image host answered %s for %s %s", response.status_code, method, endpoint)
            raise MediaDelegateError(f"Image host returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise MediaDelegateError("Image host returned a non-JSON body") from e

        if not body.get('success', False):
            raise MediaDelegateError("Image host reported failure")
        return body

    def upload(self, content: bytes, filename: str = "image", content_type: str = "application/octet-stream") -> ImageRef:
        body = self._request('POST', 'image', files={'image': (filename, content, content_type)})
        data = body.get('data') or {}
        link, delete_hash = data.get('link'), data.get('deletehash')
        if not link or not delete_hash:
            raise MediaDelegateError("Image host response is missing link or deletehash")
        logger.info("Uploaded image %s", link)
        return ImageRef(url=link, delete_hash=delete_hash)

    def delete(self, delete_hash: str) -> None:
        """Delete a remote image; raises MediaDelegateError unless the host confirms."""
        self._request('DELETE', f'image/{delete_hash}')
        logger.info("Deleted remote image")

    def close(self):
        self.session.close()


def get_media_client(request: Request) -> ImgurClient:
    return request.app.state.media_client

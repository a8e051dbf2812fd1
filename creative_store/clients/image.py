"""Image generation client (Nano Banana REST API)."""

import base64
import binascii
import logging
import time

import requests

from ..config import Settings
from ..errors import AIError

logger = logging.getLogger(__name__)

# Response shapes differ between synchronous answers and task polling,
# so each value is looked up along several paths in order.
B64_PATHS = [
    ["imageBase64"], ["image_base64"], ["base64"],
    ["data", "imageBase64"], ["data", "image_base64"], ["data", "base64"],
    ["data", "image", "base64"],
    ["output", "imageBase64"], ["output", "base64"],
]
URL_PATHS = [
    ["imageUrl"], ["image_url"], ["url"],
    ["data", "imageUrl"], ["data", "image_url"], ["data", "url"],
    ["output", "imageUrl"], ["output", "url"],
]
TASK_ID_PATHS = [["data", "task_id"], ["taskId"], ["task_id"], ["id"], ["data", "taskId"], ["data", "id"]]
STATUS_PATHS = [["data", "state"], ["status"], ["state"], ["data", "status"]]

FAILED_STATES = ("failed", "error", "cancelled")
OK_CODES = (0, 200, "0", "200")


def _value_at(obj, path: list[str]):
    for key in path:
        if not isinstance(obj, dict) or key not in obj:
            return None
        obj = obj[key]
    return obj


def _pick(obj, paths: list[list[str]]) -> str | None:
    """Return the first non-empty string found along ``paths``."""
    for path in paths:
        value = _value_at(obj, path)
        if isinstance(value, str) and value.strip():
            return value
    return None


class ImageClient:
    """Client for rendering and editing images via the Nano Banana API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://duomiapi.com/api/gemini",
        model: str = "gemini-2.5-pro-image-preview",
        image_size: str = "1K",
        poll_interval: float = 2.0,
        poll_attempts: int = 30,
        timeout: int = 120,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.image_size = image_size
        self.poll_interval = poll_interval
        self.poll_attempts = poll_attempts
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageClient":
        return cls(
            api_key=settings.image_api_key or "",
            base_url=settings.image_api_url,
            model=settings.image_model,
            image_size=settings.image_size,
            poll_interval=settings.image_poll_interval,
            poll_attempts=settings.image_poll_attempts,
        )

    def _get_headers(self) -> dict:
        return {
            "Authorization": self.api_key,
            "Content-Type": "application/json",
        }

    def generate(self, prompt: str, aspect_ratio: str, images: list[str] | None = None) -> bytes:
        """
        Render a new image.

        Args:
            prompt: Render prompt.
            aspect_ratio: Target ratio, e.g. "9:16".
            images: Optional reference images as data URLs.

        Returns:
            Raw image bytes.
        """
        payload = {
            "model": self.model,
            "prompt": prompt,
            "aspect_ratio": aspect_ratio,
            "image_size": self.image_size,
        }
        if images:
            payload["image_urls"] = images
        return self._run(f"{self.base_url}/nano-banana", payload)

    def edit(self, prompt: str, images: list[str]) -> bytes:
        """
        Edit images into one composite (first image is the base).

        Args:
            prompt: Edit instructions.
            images: Input images as data URLs.

        Returns:
            Raw image bytes.
        """
        payload = {
            "model": self.model,
            "prompt": prompt,
            "image_urls": images,
            "image_size": self.image_size,
        }
        return self._run(f"{self.base_url}/nano-banana-edit", payload)

    def _run(self, url: str, payload: dict) -> bytes:
        """Submit a job; use the immediate image or poll the task until done."""
        data = self._request("POST", url, json=payload)

        image = self._image_from_payload(data)
        if image is not None:
            return image

        task_id = _pick(data, TASK_ID_PATHS)
        if not task_id:
            raise AIError("Image service response did not contain an image or task id")

        logger.info(f"Image task {task_id} submitted, polling")
        return self._poll(task_id)

    def _poll(self, task_id: str) -> bytes:
        """Poll a task until it yields an image, fails or runs out of attempts."""
        url = f"{self.base_url}/nano-banana/{task_id}"

        for attempt in range(self.poll_attempts):
            data = self._request("GET", url)

            image = self._image_from_payload(data)
            if image is not None:
                logger.info(f"Image task {task_id} done after {attempt + 1} polls")
                return image

            status = (_pick(data, STATUS_PATHS) or "").lower()
            if status in FAILED_STATES:
                raise AIError(f"Image task {task_id} failed with status: {status}")

            time.sleep(self.poll_interval)

        raise AIError(f"Image task did not complete in time: {task_id}")

    def _request(self, method: str, url: str, json: dict | None = None) -> dict:
        """Make one request and return the checked JSON envelope."""
        try:
            if method == "POST":
                response = requests.post(url, json=json, headers=self._get_headers(), timeout=self.timeout)
            else:
                response = requests.get(url, headers=self._get_headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise AIError(str(e)) from e

        if not response.ok:
            raise AIError(f"Image service request failed ({response.status_code}): {response.text[:300]}")

        try:
            data = response.json()
        except ValueError:
            raise AIError(f"Image service returned non-JSON response: {response.text[:300]}")

        code = data.get("code") if isinstance(data, dict) else None
        if code is not None and code not in OK_CODES:
            message = _pick(data, [["msg"], ["message"], ["error"]]) or f"code {code}"
            raise AIError(f"Image service error: {message}")

        return data

    def _image_from_payload(self, data) -> bytes | None:
        """Return image bytes if the payload carries one (inline or by URL)."""
        b64 = _pick(data, B64_PATHS)
        url = _pick(data, URL_PATHS)

        if not b64 and not url:
            b64, url = self._nested_image(data)

        if b64:
            return self._decode(b64)
        if url:
            return self._download(url)
        return None

    def _nested_image(self, data) -> tuple[str | None, str | None]:
        """Handle ``{data: {data: {images: [...]}}}`` and ``{data: [{b64_json, url}]}``."""
        images = _value_at(data, ["data", "data", "images"])
        if isinstance(images, list) and images and isinstance(images[0], dict):
            first = images[0]
            return first.get("base64"), first.get("url")

        items = _value_at(data, ["data"])
        if isinstance(items, list) and items and isinstance(items[0], dict):
            first = items[0]
            return first.get("b64_json") or first.get("base64"), first.get("url")

        return None, None

    def _decode(self, b64: str) -> bytes:
        if b64.startswith("data:"):
            b64 = b64.split(",", 1)[-1]
        try:
            return base64.b64decode(b64)
        except (binascii.Error, ValueError) as e:
            raise AIError(f"Image service returned invalid base64 data: {e}") from e

    def _download(self, url: str) -> bytes:
        """Download a generated image."""
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise AIError(str(e)) from e
        if not response.ok:
            raise AIError(f"Failed to fetch generated image URL ({response.status_code})")
        return response.content

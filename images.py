"""
Image acquisition for menu and blog artwork.

Wraps the Imagen ``:predict`` endpoint. ``acquire_image`` always resolves:
any failure (missing key, transport error, non-2xx, malformed body) is
logged and answered with the configured fallback image.
"""
import logging
from typing import Optional

import httpx

from config import AppConfig
from errors import ExternalServiceError

logger = logging.getLogger(__name__)


class ImageService:
    def __init__(self, config: AppConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.api_key = config.image_api_key
        self.base_url = config.image_api_base_url.rstrip("/")
        self.model = config.image_model
        self.timeout = config.image_timeout_seconds
        self.fallback_image = config.fallback_image_url
        self._transport = transport
        self.in_flight = False

    async def acquire_image(self, prompt: str) -> str:
        self.in_flight = True
        try:
            image = await self._generate(prompt)
            logger.info("Generated image for prompt %r", prompt[:80])
            return image
        except ExternalServiceError as exc:
            logger.warning("Image generation failed, using fallback image: %s", exc)
            return self.fallback_image
        finally:
            self.in_flight = False

    async def _generate(self, prompt: str) -> str:
        if not prompt or not prompt.strip():
            raise ExternalServiceError("empty prompt")
        if not self.api_key:
            raise ExternalServiceError("IMAGE_API_KEY is not configured")

        url = f"{self.base_url}/models/{self.model}:predict"
        payload = {"instances": {"prompt": prompt.strip()}, "parameters": {"sampleCount": 1}}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, params={"key": self.api_key}, json=payload)
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"request failed: {exc!r}") from exc
        except Exception as exc:
            # injected transports are not limited to httpx errors
            raise ExternalServiceError(f"transport error: {exc!r}") from exc

        if not response.is_success:
            raise ExternalServiceError(f"image API returned {response.status_code}: {response.text[:200]}")
        try:
            prediction = response.json()["predictions"][0]
            encoded = prediction["bytesBase64Encoded"]
            mime = prediction.get("mimeType") or "image/png"
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
            raise ExternalServiceError(f"malformed image response: {exc!r}") from exc
        if not isinstance(encoded, str) or not encoded:
            raise ExternalServiceError("image response carried no image data")
        return f"data:{mime};base64,{encoded}"

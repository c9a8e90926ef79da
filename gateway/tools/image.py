from __future__ import annotations

import logging

import httpx

from .base import CapabilityAdapter

logger = logging.getLogger(__name__)


class ImageAdapter(CapabilityAdapter):
    """Image synthesis client; ``invoke`` returns an image URL or ""."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        base_url: str,
        deployment: str,
        api_version: str,
        size: str = "1024x1024",
    ) -> None:
        super().__init__(client, api_key, base_url)
        self.deployment = deployment
        self.api_version = api_version
        self.size = size

    @property
    def url(self) -> str:
        return (
            f"{self.base_url}/openai/deployments/{self.deployment}"
            "/images/generations"
        )

    async def invoke(self, prompt: str) -> str:
        if not self.api_key:
            logger.warning("Image generation skipped: AZURE_API_KEY is not set")
            return ""

        try:
            response = await self.client.post(
                self.url,
                params={"api-version": self.api_version},
                headers={"api-key": self.api_key},
                json={"prompt": prompt, "n": 1, "size": self.size},
            )
            if response.is_error:
                logger.error(
                    "Image generation request failed (status=%s): %s",
                    response.status_code,
                    response.text,
                )
                return ""

            payload = response.json()
            image_url = payload["data"][0]["url"]
        except ValueError:
            logger.error("Image generation returned invalid JSON")
            return ""
        except (KeyError, IndexError, TypeError):
            logger.error("No image URL in the image generation response")
            return ""
        except Exception:
            logger.exception("Image generation error")
            return ""

        if not isinstance(image_url, str) or not image_url.startswith(("http://", "https://")):
            logger.error("Image generation returned an unusable URL: %r", image_url)
            return ""
        return image_url

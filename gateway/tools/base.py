from __future__ import annotations

from abc import ABC, abstractmethod

import httpx


class CapabilityAdapter(ABC):
    """Thin async client for one third-party capability.

    ``invoke`` never raises: upstream failures are logged and turned into
    a degraded but valid result.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        base_url: str,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @abstractmethod
    async def invoke(self, argument: str) -> str:
        raise NotImplementedError

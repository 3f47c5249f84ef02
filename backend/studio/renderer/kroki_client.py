from typing import Optional

import httpx

from studio.config import KROKI_URL, RENDER_TIMEOUT
from studio.errors import BackendError


class KrokiBackend:
    """
    Renders Mermaid source to SVG through a Kroki-compatible service.

    POST {base_url}/mermaid/svg
        {"diagram_source": "...", "diagram_options": {"theme": "dark"}}

    Non-2xx responses carry the renderer's error text in the body, which
    becomes the BackendError message.
    """

    def __init__(
        self,
        base_url: str = KROKI_URL,
        timeout: float = RENDER_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def render_svg(self, source: str, theme: str = "default") -> str:
        return (await self._post(source, theme, "svg")).text

    async def _post(self, source: str, theme: str, fmt: str) -> httpx.Response:
        payload = {
            "diagram_source": source,
            "diagram_options": {"theme": theme},
        }
        url = f"{self.base_url}/mermaid/{fmt}"

        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload)
        except httpx.TimeoutException as e:
            raise BackendError(f"Rendering service timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise BackendError(f"Rendering service unreachable: {e}") from e

        if response.status_code >= 400:
            raise BackendError(response.text.strip() or f"HTTP {response.status_code}")

        return response

import requests
from typing import Dict, List, Optional

from studio.inference.base import LLMClient
from studio.utils.json_extract import strip_code_fences


class ChatCompletionsClient(LLMClient):
    def __init__(
        self,
        base_url: str,
        model: str,
        temperature: float = 0.2,
        api_key: str = "",
        timeout: int = 300,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.api_key = api_key
        self.timeout = timeout

    def generate(
        self,
        messages: List[Dict],
        temperature: Optional[float] = None,
    ) -> str:
        url = f"{self.base_url}/chat/completions"

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
        }

        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        response = requests.post(
            url,
            json=payload,
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()

        content = response.json()["choices"][0]["message"]["content"] or ""

        #  STRIP MARKDOWN FENCES
        return strip_code_fences(content)

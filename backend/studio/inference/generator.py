from typing import Callable, Optional

from studio.dsl.mermaid import clean_generated_source
from studio.errors import GenerationError
from studio.inference.base import LLMClient
from studio.inference.config import get_llm_client
from studio.inference.prompt import (
    MERMAID_SYSTEM_PROMPT,
    MERMAID_TEMPERATURE,
    SHAPES_SYSTEM_PROMPT,
    SHAPES_TEMPERATURE,
)
from studio.sync.state import DiagramType


class DiagramGenerator:
    """
    Turns a natural-language prompt into diagram source.

    TEXTUAL -> Mermaid source text, fences stripped
    VISUAL  -> raw JSON text of a shape list (parsed by the normalizer)
    """

    def __init__(self, client_factory: Callable[[str], LLMClient] = get_llm_client):
        self.client_factory = client_factory

    def generate(self, prompt: str, diagram_type: DiagramType, model: Optional[str] = None) -> str:
        client = self.client_factory(model) if model else self.client_factory()

        if diagram_type == DiagramType.TEXTUAL:
            system_prompt, temperature = MERMAID_SYSTEM_PROMPT, MERMAID_TEMPERATURE
        else:
            system_prompt, temperature = SHAPES_SYSTEM_PROMPT, SHAPES_TEMPERATURE

        messages = [
            {"role": "system", "content": system_prompt.strip()},
            {"role": "user", "content": prompt},
        ]

        try:
            text = client.generate(messages, temperature=temperature)
        except Exception as e:
            print(f"[GENERATE] ⚠️ {diagram_type.value} generation failed: {e}")
            raise GenerationError(
                "Failed to generate diagram. Please check your API key and try again."
            ) from e

        if diagram_type == DiagramType.TEXTUAL:
            return clean_generated_source(text)
        return text or "[]"

from abc import ABC, abstractmethod
from typing import List, Dict, Optional


class LLMClient(ABC):
    @abstractmethod
    def generate(
        self,
        messages: List[Dict],
        temperature: Optional[float] = None,
    ) -> str:
        """Generate assistant text from chat messages"""
        pass

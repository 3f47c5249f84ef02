from studio.config import LLM_API_KEY, LLM_BASE_URL, LLM_MODEL
from .chat_completions_client import ChatCompletionsClient

SUPPORTED_MODELS = [
    {"id": "gemini-2.5-flash", "name": "Gemini 2.5 Flash (Fast)"},
    {"id": "gemini-3-pro-preview", "name": "Gemini 3 Pro (High Quality)"},
]


def get_llm_client(model: str = LLM_MODEL):
    if not LLM_API_KEY:
        print("[GENERATE] ⚠️ LLM_API_KEY is missing from environment variables")
    return ChatCompletionsClient(
        base_url=LLM_BASE_URL,
        model=model,
        api_key=LLM_API_KEY,
    )

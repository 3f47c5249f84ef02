import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

KROKI_URL = os.getenv("KROKI_URL", "https://kroki.io")
RENDER_TIMEOUT = float(os.getenv("RENDER_TIMEOUT", "30"))

LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai")
LLM_MODEL = os.getenv("LLM_MODEL", "gemini-2.5-flash")
LLM_API_KEY = os.getenv("LLM_API_KEY", "")

HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "20"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

import os

from dotenv import load_dotenv

# Load from .env if it exists (useful for local development)
load_dotenv()

LOGGING_LEVEL = os.getenv("LOGGING_LEVEL", "INFO").upper()

# Which backend build_analyzer_from_env() wires up: "openai" | "gemini"
AI_PROVIDER = os.getenv("AI_PROVIDER", "gemini")

# OpenAI (or any OpenAI-compatible gateway via OPENAI_BASE_URL)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")

# Google Gemini
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

# Optional JSON file with {"analyze": ..., "similar": ..., "reanswer": ...}
PROMPT_TEMPLATES_FILE = os.getenv("PROMPT_TEMPLATES_FILE", "")

DEFAULT_MAX_TOKENS = 4096

import os
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

# --- Completion service ---
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
COMPLETION_MODEL = os.getenv("COMPLETION_MODEL", "claude-sonnet-4-5")
COMPLETION_TIMEOUT_SECONDS = float(os.getenv("COMPLETION_TIMEOUT_SECONDS", "30"))

EXTRACTION_MAX_TOKENS = int(os.getenv("EXTRACTION_MAX_TOKENS", "1024"))
EXTRACTION_TEMPERATURE = float(os.getenv("EXTRACTION_TEMPERATURE", "0.9"))
ANALYSIS_MAX_TOKENS = int(os.getenv("ANALYSIS_MAX_TOKENS", "2048"))
ANALYSIS_TEMPERATURE = float(os.getenv("ANALYSIS_TEMPERATURE", "0.7"))

# --- Storage ---
DATABASE_PATH = os.getenv("DATABASE_PATH", "todos.db")

# --- Server ---
APP_TIMEZONE = ZoneInfo(os.getenv("APP_TIMEZONE", "Asia/Seoul"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def is_completion_configured() -> bool:
    return bool(ANTHROPIC_API_KEY) and ANTHROPIC_API_KEY != "your-api-key-here"

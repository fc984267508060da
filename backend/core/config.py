# backend/core/config.py

import os
from pathlib import Path
from dotenv import load_dotenv


# --- Correctly load the .env file ---
dotenv_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=dotenv_path)


# ==========================================
# CONFIGURATION
# ==========================================
class AppConfig:
    """Centralized service configuration. Values come from the environment where noted."""
    MODEL_NAME = os.getenv("VERTEX_MODEL", "gemini-2.5-flash")
    API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    REQUEST_TIMEOUT = float(os.getenv("VERTEX_REQUEST_TIMEOUT", "60"))

    # Only used to seed an empty credential store, never written back to source
    DEFAULT_API_KEY = os.getenv("GEMINI_API_KEY", "")

    STORAGE_PATH = Path(
        os.getenv("VERTEX_STORAGE_PATH", str(Path.home() / ".vertex-architect" / "storage.json"))
    )

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    ALLOWED_ORIGINS = [
        "http://localhost",
        "http://localhost:5173",
        "http://localhost:5500",
        "http://127.0.0.1",
        "http://127.0.0.1:5500",
    ]

    # Persistent storage keys
    HISTORY_KEY = "vertex_architect_history"
    API_KEY_KEY = "vertex_api_key"

    TOAST_TTL_SECONDS = 3

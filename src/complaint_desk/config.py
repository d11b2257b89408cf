"""Configuration module for Complaint Desk.

This module provides centralized configuration management, including directory
paths, local storage settings, API server settings, authentication literals,
attachment limits and AI collaborator configuration.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.parent.resolve()

# Data directory (overridable so several profiles can coexist on one machine)
DATA_DIR = Path(os.getenv("COMPLAINT_DESK_DATA_DIR", str(ROOT_DIR / "data")))

# --- Local Storage Configuration ---

# SQLite file acting as the device-local key-value store
STORAGE_DATABASE_URL: str = os.getenv(
    "STORAGE_DATABASE_URL", f"sqlite:///{DATA_DIR}/complaint_desk.db"
)

# Keys of the two independent persisted records
SESSION_STORAGE_KEY: str = "currentUser"
COMPLAINTS_STORAGE_KEY: str = "csDepartmentComplaints"

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Authentication Configuration ---

# Fixed admin credential pair. Not a security boundary.
ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "password")
ADMIN_USER_ID: str = "admin01"

# Any id of this shape logs in as a student, known or not
STUDENT_ID_PATTERN: str = r"^U\d{4}/\d{7}$"

# --- Notification Configuration ---

NOTIFICATION_TIMEOUT_SECONDS: float = float(
    os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "3")
)

# --- Upload Configuration ---

MAX_ATTACHMENT_BYTES: int = 5 * 1024 * 1024
MAX_PROFILE_PICTURE_BYTES: int = 10 * 1024 * 1024
PROFILE_PICTURE_MAX_SIZE: int = 400
PROFILE_PICTURE_JPEG_QUALITY: int = 90

# --- Calendar Configuration ---

# Timezone whose calendar day decides "overdue" and "due today"
APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "UTC")

# --- LLM Configuration ---

TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))

# Default provider for the complaint writing assistant
DEFAULT_LLM_PROVIDER: str = os.getenv("DEFAULT_LLM_PROVIDER", "gemini")

# Provider registry for OpenAI-compatible endpoints
LLM_PROVIDERS: Dict[str, Dict[str, Optional[str]]] = {
    "gemini": {
        "display_name": "Google Gemini",
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "default_model": "gemini-2.5-flash",
        "env_key": "GOOGLE_API_KEY",
    },
    "openai": {
        "display_name": "OpenAI",
        "base_url": None,
        "default_model": "gpt-4o",
        "env_key": "OPENAI_API_KEY",
    },
    "deepseek": {
        "display_name": "DeepSeek",
        "base_url": "https://api.deepseek.com",
        "default_model": "deepseek-chat",
        "env_key": "DEEPSEEK_API_KEY",
    },
}

# Set to "false" to run with offline stub assistants
AI_FEATURES_ENABLED: bool = os.getenv("AI_FEATURES_ENABLED", "true").lower() == "true"

# --- Live Voice Configuration ---

LIVE_VOICE_MODEL: str = os.getenv(
    "LIVE_VOICE_MODEL", "gemini-2.5-flash-native-audio-preview-09-2025"
)
LIVE_VOICE_API_KEY_ENV: str = "GOOGLE_API_KEY"
INPUT_SAMPLE_RATE: int = 16000
OUTPUT_SAMPLE_RATE: int = 24000

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

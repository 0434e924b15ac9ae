from pathlib import Path
import logging
import os

from dotenv import load_dotenv

# Load environment variables from the project root and the package dir (if present).
REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")
load_dotenv(Path(__file__).resolve().parent / ".env")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tasks.db")

_cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
CORS_ORIGINS = [origin.strip() for origin in _cors_origins.split(",") if origin.strip()]

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))

# Where the client finds the API.
API_URL = os.getenv("API_URL", f"http://localhost:{PORT}")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

REMINDER_INTERVAL_SECONDS = int(os.getenv("REMINDER_INTERVAL_SECONDS", "3600"))
REMINDER_WINDOW_HOURS = int(os.getenv("REMINDER_WINDOW_HOURS", "24"))
NOTIFICATION_TTL_SECONDS = int(os.getenv("NOTIFICATION_TTL_SECONDS", "6"))

# Flat JSON array written by older versions; imported once into an empty store.
_legacy_data_file = os.getenv("LEGACY_DATA_FILE", "")
LEGACY_DATA_FILE = Path(_legacy_data_file).expanduser() if _legacy_data_file else None


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging once for the server or the CLI."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

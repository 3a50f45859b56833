import logging
import os

# ----------------------------
# Settings
# ----------------------------
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./family_health.db")

UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.path.dirname(__file__), "..", "uploads"))
ALLOWED_EXTENSIONS = {"pdf", "jpg", "jpeg", "png", "gif", "txt", "doc", "docx"}

DEFAULT_USER_ID = os.getenv("DEFAULT_USER_ID", "demo-user")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "30"))

# Leave empty to use tesseract from PATH.
TESSERACT_CMD = os.getenv("TESSERACT_CMD", "")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(level=None):
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

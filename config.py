# config.py
import os

# ========== CONFIG ==========
DB_PATH = os.environ.get("DB_PATH", "./data/paintings.db")

MODULE_URL = os.environ.get(
    "MODULE_URL",
    "https://tfhub.dev/google/imagenet/mobilenet_v2_100_224/classification/5",
)
IMAGE_SIZE = int(os.environ.get("IMAGE_SIZE", "224"))
CROP_FRAME = os.environ.get("CROP_FRAME", "false").lower() == "true"

# Minimum cosine similarity for a positive recognition. Tune per catalog.
CONFIDENCE_THRESHOLD = float(os.environ.get("CONFIDENCE_THRESHOLD", "0.6"))

MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
DEFAULT_MUSEUM = os.environ.get("DEFAULT_MUSEUM", "National Gallery, London")

ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY")
ANTHROPIC_API_URL = os.environ.get("ANTHROPIC_API_URL", "https://api.anthropic.com/v1/messages")
ANTHROPIC_MODEL = os.environ.get("ANTHROPIC_MODEL", "claude-3-haiku-20240307")
ANTHROPIC_MAX_TOKENS = int(os.environ.get("ANTHROPIC_MAX_TOKENS", "200"))
DESCRIBER_TIMEOUT = float(os.environ.get("DESCRIBER_TIMEOUT", "20"))

LOG_DIR = os.environ.get("LOG_DIR", "logs")
BACKGROUND_WORKERS = int(os.environ.get("BACKGROUND_WORKERS", "2"))
PORT = int(os.environ.get("PORT", "3000"))

VERSION = "2.1.0"
# ============================

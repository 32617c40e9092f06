"""Project-wide configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(os.environ.get("FACESENSE_PROJECT_ROOT", Path.cwd()))

load_dotenv(PROJECT_ROOT / ".env")

# Face detection – Google Cloud Vision
VISION_API_KEY = os.environ.get("GOOGLE_VISION_API_KEY", "")
VISION_API_BASE = "https://vision.googleapis.com/v1"
VISION_MAX_RESULTS = 10

# Identity graph – Facebook Graph API + face recognition endpoint
GRAPH_ACCESS_TOKEN = os.environ.get("FB_ACCESS_TOKEN", "")
GRAPH_API_BASE = os.environ.get("FB_GRAPH_API_BASE", "https://graph.facebook.com/v19.0")
RECOGNITION_URL = os.environ.get(
    "FB_RECOGNITION_URL", "https://www.facebook.com/photos/tagging/recognition/"
)
RECOGNITION_COOKIE = os.environ.get("FB_COOKIE", "")
RECOGNITION_DTSG = os.environ.get("FB_DTSG", "")

# Recognition polling
POLL_MAX_ATTEMPTS = int(os.environ.get("FACESENSE_POLL_MAX_ATTEMPTS", "10"))
POLL_INTERVAL = float(os.environ.get("FACESENSE_POLL_INTERVAL", "0"))
POLL_SETTLE_DELAY = float(os.environ.get("FACESENSE_POLL_SETTLE_DELAY", "2"))

HTTP_TIMEOUT = int(os.environ.get("FACESENSE_HTTP_TIMEOUT", "30"))
LOG_LEVEL = os.environ.get("FACESENSE_LOG_LEVEL", "INFO")
